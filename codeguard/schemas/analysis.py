"""Pydantic schemas for the scan endpoint: request, AI review shape, and composed analysis result."""

from pydantic import BaseModel, Field

from codeguard.schemas.findings import ExplanationLevel, Finding


class AIReview(BaseModel):
    """Parsed model-provider output (or the local fallback when parsing failed)."""

    summary: str = Field(default="", description="Model's overall assessment.")
    issues: list[Finding] = Field(
        default_factory=list,
        description="Additional findings reported by the model (origin=ai).",
    )
    fixed_code: str | None = Field(default=None, description="Suggested corrected code.")
    score: int | None = Field(
        default=None,
        description="Model's self-reported 0-100 score; None when absent or unparseable.",
    )


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/v1/scan."""

    code: str = Field(..., description="Source code to analyze.")
    language: str = Field(..., max_length=64, description="Language tag, e.g. python.")
    explanation_level: ExplanationLevel = Field(
        default="senior",
        description="Audience for AI explanations: junior, senior, or lead.",
    )
    file_path: str | None = Field(
        default=None,
        max_length=2048,
        description="Optional path; drives file-scoped suppressions and policy ignore_paths.",
    )
    save_to_history: bool = Field(
        default=False,
        description="Persist a scan record (requires an API key).",
    )


class SeverityCounts(BaseModel):
    """Active-finding counts per severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class ConfidenceDistribution(BaseModel):
    """Active-finding counts per confidence tier."""

    high: int = 0
    medium: int = 0
    low: int = 0


class DiffSummary(BaseModel):
    """Change relative to the previous scan of the same account."""

    new_issues: int = Field(default=0, ge=0)
    fixed_issues: int = Field(default=0, ge=0)
    unchanged_issues: int = Field(default=0, ge=0)
    new_issue_details: list[Finding] = Field(default_factory=list)
    fixed_issue_fingerprints: list[str] = Field(
        default_factory=list,
        description="Fingerprints only; findings of fixed issues are not retained.",
    )


class PolicyEvaluation(BaseModel):
    """Pass/fail against the account's active policy."""

    passed: bool = True
    violations: list[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Composed result of one analysis, returned to API and CI consumers."""

    summary: str = ""
    issues: list[Finding] = Field(default_factory=list, description="Active findings.")
    suppressed_issues: list[Finding] = Field(
        default_factory=list,
        description="Findings hidden by suppression rules; kept for audit.",
    )
    fixed_code: str | None = None
    score: int = Field(..., ge=0, le=100)
    severity_counts: SeverityCounts = Field(default_factory=SeverityCounts)
    confidence_distribution: ConfidenceDistribution = Field(
        default_factory=ConfidenceDistribution
    )
    diff: DiffSummary = Field(default_factory=DiffSummary)
    new_since_baseline: int = Field(default=0, ge=0)
    policy_evaluation: PolicyEvaluation = Field(default_factory=PolicyEvaluation)
    fingerprints: list[str] = Field(
        default_factory=list,
        description="Fingerprints of active findings, for the next scan's diff.",
    )
    scan_id: int | None = Field(
        default=None,
        description="ID of the persisted scan record, when saved.",
    )
