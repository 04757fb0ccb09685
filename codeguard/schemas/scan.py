"""Pydantic schemas for scan history, baselines, and usage."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PreviousScan(BaseModel):
    """Slice of the most recent scan needed for diffing."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    fingerprints: list[str] = Field(default_factory=list)


class UsageSnapshot(BaseModel):
    """Per-account usage counter as read from the store."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str
    subscription_tier: str = "free"
    scans_this_month: int = Field(default=0, ge=0)
    scans_limit: int = Field(default=10, ge=0)
    billing_period_start: datetime


class ScanRecordCreate(BaseModel):
    """Immutable scan record handed to the store for insertion."""

    code_hash: str = Field(..., min_length=64, max_length=64)
    language: str
    summary: str | None = None
    score: int = Field(..., ge=0, le=100)
    issues_count: int = Field(default=0, ge=0)
    critical_count: int = Field(default=0, ge=0)
    high_count: int = Field(default=0, ge=0)
    medium_count: int = Field(default=0, ge=0)
    low_count: int = Field(default=0, ge=0)
    issues: list[dict[str, Any]] = Field(default_factory=list)
    static_checks: list[dict[str, Any]] = Field(default_factory=list)
    fixed_code: str | None = None
    fingerprints: list[str] = Field(default_factory=list)
    previous_scan_id: int | None = None
    new_issues_count: int | None = None
    fixed_issues_count: int | None = None
    policy_id: int | None = None
    policy_passed: bool | None = None


class ScanSummary(BaseModel):
    """One row of GET /api/v1/history."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    language: str
    score: int
    summary: str | None = None
    issues_count: int
    critical_count: int
    high_count: int
    medium_count: int
    low_count: int
    new_issues_count: int | None = None
    fixed_issues_count: int | None = None
    policy_passed: bool | None = None
    created_at: datetime | None = None


class ScanDetail(ScanSummary):
    """Full scan record for GET /api/v1/history/{id}."""

    code_hash: str
    issues: list[dict[str, Any]] = Field(default_factory=list)
    static_checks: list[dict[str, Any]] | None = None
    fixed_code: str | None = None
    fingerprints: list[str] = Field(default_factory=list)
    previous_scan_id: int | None = None
    policy_id: int | None = None


class HistoryResponse(BaseModel):
    """Paginated scan history."""

    scans: list[ScanSummary]
    limit: int
    offset: int


class BaselineCreate(BaseModel):
    """Request body for POST /api/v1/baselines: snapshot a scan's fingerprints."""

    scan_id: int = Field(..., ge=1)
    name: str = Field(default="Baseline", min_length=1, max_length=255)


class BaselineOut(BaseModel):
    """Baseline as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    baseline_scan_id: int | None = None
    fingerprints: list[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime | None = None


class UsageResponse(UsageSnapshot):
    """Response for GET /api/v1/usage."""

    scans_remaining: int = Field(default=0, ge=0)


class ShareCreate(BaseModel):
    """Request body for POST /api/v1/shared."""

    scan_id: int = Field(..., ge=1)
    expires_in_days: int | None = Field(
        default=None,
        ge=1,
        le=365,
        description="Link lifetime; omit for a link that never expires.",
    )


class ShareOut(BaseModel):
    """Share link as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    scan_id: int
    share_token: str
    expires_at: datetime | None = None
    view_count: int = 0
    created_at: datetime | None = None


class SharedReportView(BaseModel):
    """Public read-only view for GET /api/v1/shared/{token}."""

    scan: ScanDetail
    expires_at: datetime | None = None
    view_count: int
