"""Pydantic request/response schemas."""

from codeguard.schemas.analysis import (
    AIReview,
    AnalysisResult,
    AnalyzeRequest,
    ConfidenceDistribution,
    DiffSummary,
    PolicyEvaluation,
    SeverityCounts,
)
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.findings import (
    ConfidenceLevel,
    ExplanationLevel,
    Finding,
    IssueKind,
    Origin,
    SecretContext,
    SeverityLevel,
)
from codeguard.schemas.health import HealthResponse
from codeguard.schemas.policy import (
    PolicyConfig,
    PolicyCreate,
    PolicyOut,
    PolicyUpdate,
    SuppressionCreate,
    SuppressionOut,
    SuppressionRuleConfig,
    SuppressionUpdate,
)
from codeguard.schemas.scan import (
    BaselineCreate,
    BaselineOut,
    HistoryResponse,
    PreviousScan,
    ScanDetail,
    ScanRecordCreate,
    ScanSummary,
    ShareCreate,
    SharedReportView,
    ShareOut,
    UsageResponse,
    UsageSnapshot,
)

__all__ = [
    "AIReview",
    "AnalysisResult",
    "AnalyzeRequest",
    "BaselineCreate",
    "BaselineOut",
    "ConfidenceDistribution",
    "ConfidenceLevel",
    "CurrentAccount",
    "DiffSummary",
    "ExplanationLevel",
    "Finding",
    "HealthResponse",
    "HistoryResponse",
    "IssueKind",
    "Origin",
    "PolicyConfig",
    "PolicyCreate",
    "PolicyEvaluation",
    "PolicyOut",
    "PolicyUpdate",
    "PreviousScan",
    "ScanDetail",
    "ScanRecordCreate",
    "ScanSummary",
    "SecretContext",
    "ShareCreate",
    "SharedReportView",
    "ShareOut",
    "SeverityCounts",
    "SeverityLevel",
    "SuppressionCreate",
    "SuppressionOut",
    "SuppressionRuleConfig",
    "SuppressionUpdate",
    "UsageResponse",
    "UsageSnapshot",
]
