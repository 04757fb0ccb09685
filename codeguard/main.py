"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codeguard import __version__
from codeguard.api.v1 import router as v1_router
from codeguard.core.config import settings

app = FastAPI(
    title="CodeGuard API",
    description="Hybrid static and LLM security scanning of source code snippets.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; points clients at the scan and health endpoints."""
    return {
        "message": "CodeGuard API",
        "version": __version__,
        "scan": f"{settings.API_V1_PREFIX}/scan",
        "health": f"{settings.API_V1_PREFIX}/health",
    }
