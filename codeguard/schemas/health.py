"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for GET /api/v1/health."""

    status: Literal["ok", "degraded"] = Field(
        default="ok",
        description="'degraded' when the database is unreachable or not migrated",
    )
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected", "unmigrated"]
    auth_enabled: bool = Field(description="Whether POST /scan requires an X-API-Key")
    ai_model: str = Field(description="Model name sent to the AI provider")
