"""Tagged errors raised by the analysis pipeline. The API layer maps them to HTTP responses."""


class AnalysisError(Exception):
    """Base for analysis failures that callers must be able to tell apart."""

    code = "analysis_failed"
    status_code = 500
    retryable = False

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class InvalidInputError(AnalysisError):
    """Missing or oversized code/language; rejected before any external call."""

    code = "invalid_input"
    status_code = 400


class QuotaExceededError(AnalysisError):
    """Caller is at or over the monthly scan limit."""

    code = "quota_exceeded"
    status_code = 429

    def __init__(self, message: str, limit: int | None = None) -> None:
        self.limit = limit
        super().__init__(message)


class ModelRateLimitedError(AnalysisError):
    """Model provider answered HTTP 429."""

    code = "model_rate_limited"
    status_code = 429
    retryable = True


class ModelQuotaExhaustedError(AnalysisError):
    """Model provider answered HTTP 402 (credits exhausted)."""

    code = "model_quota_exhausted"
    status_code = 402


class PersistenceError(AnalysisError):
    """Record store unavailable or a read/write against it failed."""

    code = "persistence_failed"
    status_code = 503
    retryable = True


class ModelUnavailableError(AnalysisError):
    """Model provider unreachable, timed out, or returned another non-success status."""

    code = "model_unavailable"
    status_code = 503

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        retryable: bool = True,
        upstream_status: int | None = None,
    ) -> None:
        self.retryable = retryable
        self.upstream_status = upstream_status
        super().__init__(message, cause=cause)
