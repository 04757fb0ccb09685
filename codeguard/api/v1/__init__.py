"""API v1 routes."""

from fastapi import APIRouter

from codeguard.api.v1 import (
    baselines,
    health,
    history,
    policies,
    scan,
    shares,
    suppressions,
    usage,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(scan.router, prefix="/scan", tags=["scan"])
router.include_router(history.router, prefix="/history", tags=["history"])
router.include_router(policies.router, prefix="/policies", tags=["policies"])
router.include_router(suppressions.router, prefix="/suppressions", tags=["suppressions"])
router.include_router(baselines.router, prefix="/baselines", tags=["baselines"])
router.include_router(usage.router, prefix="/usage", tags=["usage"])
router.include_router(shares.router, prefix="/shared", tags=["shared"])
