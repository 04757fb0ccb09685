"""Health check: database and schema readiness plus the active scan configuration."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from codeguard.core.config import get_settings
from codeguard.core.database import database_status, get_db
from codeguard.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    settings = get_settings()
    db_status = database_status(db)
    return HealthResponse(
        status="ok" if db_status == "connected" else "degraded",
        environment=settings.APP_ENV,
        database=db_status,
        auth_enabled=settings.AUTH_ENABLED,
        ai_model=settings.AI_MODEL,
    )
