"""Pydantic schemas for security policies and suppression rules (pipeline inputs and CRUD bodies)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SuppressionScope = Literal["global", "file", "repo"]
WILDCARD_ISSUE_TYPE = "*"

_ISSUE_TYPE_VALUES = frozenset(
    {"vulnerability", "bug", "code_smell", "performance", WILDCARD_ISSUE_TYPE}
)


def _validate_issue_type(value: str) -> str:
    """Ensure issue_type is a known kind or the '*' wildcard."""
    normalized = (value or "").strip().lower()
    if normalized not in _ISSUE_TYPE_VALUES:
        raise ValueError(
            f"issue_type must be one of {sorted(_ISSUE_TYPE_VALUES)}, got {value!r}"
        )
    return normalized


def _clean_paths(paths: list[str] | None) -> list[str]:
    """Strip entries and drop empties (an empty substring would exempt every path)."""
    return [p.strip() for p in (paths or []) if p and p.strip()]


class PolicyConfig(BaseModel):
    """Thresholds consumed by the policy evaluator."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    name: str = "Default Policy"
    max_critical: int = Field(default=0, ge=0)
    max_high: int = Field(default=0, ge=0)
    max_medium: int = Field(default=5, ge=0)
    max_low: int | None = Field(default=None, ge=0, description="None means unlimited.")
    ignore_paths: list[str] = Field(default_factory=list)

    @field_validator("ignore_paths", mode="before")
    @classmethod
    def validate_ignore_paths(cls, v: list[str] | None) -> list[str]:
        return _clean_paths(v)


class PolicyCreate(BaseModel):
    """Request body for POST /api/v1/policies."""

    name: str = Field(default="Default Policy", min_length=1, max_length=255)
    is_active: bool = True
    max_critical: int = Field(default=0, ge=0)
    max_high: int = Field(default=0, ge=0)
    max_medium: int = Field(default=5, ge=0)
    max_low: int | None = Field(default=None, ge=0)
    ignore_paths: list[str] = Field(default_factory=list, max_length=100)

    @field_validator("ignore_paths", mode="before")
    @classmethod
    def validate_ignore_paths(cls, v: list[str] | None) -> list[str]:
        return _clean_paths(v)


class PolicyUpdate(BaseModel):
    """Request body for PATCH /api/v1/policies/{id}; only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_active: bool | None = None
    max_critical: int | None = Field(default=None, ge=0)
    max_high: int | None = Field(default=None, ge=0)
    max_medium: int | None = Field(default=None, ge=0)
    max_low: int | None = Field(default=None, ge=0)
    ignore_paths: list[str] | None = Field(default=None, max_length=100)

    @field_validator("ignore_paths", mode="before")
    @classmethod
    def validate_ignore_paths(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _clean_paths(v)


class PolicyOut(PolicyConfig):
    """Policy as returned by the API."""

    id: int
    is_active: bool
    created_at: datetime | None = None


class SuppressionRuleConfig(BaseModel):
    """Suppression rule consumed by the suppression filter."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    issue_type: str = Field(..., description="Issue kind or '*' for any kind.")
    issue_title: str | None = Field(
        default=None,
        description="Case-insensitive substring of the finding title.",
    )
    scope: SuppressionScope = "global"
    file_path: str | None = Field(default=None, description="Path substring for file scope.")
    is_active: bool = True
    expires_at: datetime | None = None


class SuppressionCreate(BaseModel):
    """Request body for POST /api/v1/suppressions."""

    issue_type: str = Field(..., min_length=1, max_length=32)
    issue_title: str | None = Field(default=None, max_length=512)
    scope: SuppressionScope = "global"
    file_path: str | None = Field(default=None, max_length=2048)
    reason: str | None = Field(default=None, max_length=2000)
    is_active: bool = True
    expires_at: datetime | None = None

    @field_validator("issue_type")
    @classmethod
    def validate_issue_type(cls, v: str) -> str:
        return _validate_issue_type(v)


class SuppressionUpdate(BaseModel):
    """Request body for PATCH /api/v1/suppressions/{id}."""

    is_active: bool | None = None
    expires_at: datetime | None = None
    reason: str | None = Field(default=None, max_length=2000)


class SuppressionOut(SuppressionRuleConfig):
    """Suppression rule as returned by the API."""

    id: int
    reason: str | None = None
    created_at: datetime | None = None
