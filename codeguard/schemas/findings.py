"""Pydantic schemas for findings: the single tagged Finding type shared by both detectors."""

from typing import Literal

from pydantic import BaseModel, Field

# Reusable enumerations for validation and type safety across schemas.
IssueKind = Literal["vulnerability", "bug", "code_smell", "performance"]
SeverityLevel = Literal["critical", "high", "medium", "low"]
Origin = Literal["static", "ai"]
ConfidenceLevel = Literal["High", "Medium", "Low"]
ExplanationLevel = Literal["junior", "senior", "lead"]

ISSUE_KINDS: frozenset[str] = frozenset({"vulnerability", "bug", "code_smell", "performance"})

# Highest first; index doubles as rank for "critical > high > medium > low".
SEVERITY_ORDER: tuple[SeverityLevel, ...] = ("critical", "high", "medium", "low")
SEVERITY_VALUES: frozenset[str] = frozenset(SEVERITY_ORDER)

DETECTION_STATIC = "Static Pattern Match"
DETECTION_AI = "AI Reasoning"


class SecretContext(BaseModel):
    """Risk classification attached to hardcoded-secret findings only."""

    risk_level: SeverityLevel = Field(
        ...,
        description="Derived risk; replaces the rule's default severity.",
    )
    is_test_key: bool = Field(
        ...,
        description="Test/demo/sample vocabulary found in the line or file header.",
    )
    is_live_key: bool = Field(
        ...,
        description="Not a test key and either high-privilege or marked live/prod.",
    )
    is_high_privilege: bool = Field(
        ...,
        description="Credential type grants broad access (e.g. live Stripe, AWS).",
    )
    key_type: str = Field(
        ...,
        min_length=1,
        description="Inferred provider/credential type (e.g. 'Stripe API Key').",
    )
    rotation_steps: list[str] = Field(
        default_factory=list,
        description="Ordered remediation steps for rotating this credential type.",
    )


class Finding(BaseModel):
    """One reported issue from either detector, after optional enrichment by the pipeline."""

    kind: IssueKind = Field(
        ...,
        description="Issue kind: vulnerability, bug, code_smell, or performance.",
    )
    severity: SeverityLevel = Field(
        ...,
        description="Severity level: critical, high, medium, or low.",
    )
    title: str = Field(
        ...,
        description="Short human label; used for matching, suppression, and fingerprinting.",
    )
    description: str = Field(default="", description="What was found and why it matters.")
    remediation: str = Field(default="", description="How to fix it.")
    line: int | None = Field(
        default=None,
        ge=1,
        description="1-based source line, when known.",
    )
    category_id: str = Field(
        default="A05",
        description="OWASP Top 10 (2021) identifier, e.g. A03.",
    )
    category_name: str = Field(
        default="Security Misconfiguration",
        description="OWASP Top 10 (2021) category name.",
    )
    weakness_id: str | None = Field(
        default=None,
        description="CWE reference, e.g. CWE-89.",
    )
    origin: Origin = Field(..., description="Which detector produced the finding.")
    confidence: ConfidenceLevel | None = Field(
        default=None,
        description="Cross-detector trust tier; assigned during fusion.",
    )
    confidence_reason: str | None = Field(default=None)
    detection_methods: list[str] = Field(default_factory=list)
    fingerprint: str | None = Field(
        default=None,
        description="Stable identity derived from (kind, title, line); assigned during fusion.",
    )
    secret_context: SecretContext | None = Field(
        default=None,
        description="Present only for hardcoded-secret findings.",
    )
