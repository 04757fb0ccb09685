"""SQLAlchemy ORM models."""

from codeguard.models.account import ApiKey, UsageTracking
from codeguard.models.base import Base
from codeguard.models.policy import SecurityPolicy, SuppressionRule
from codeguard.models.scan import ScanBaseline, ScanRecord, SharedReport

__all__ = [
    "ApiKey",
    "Base",
    "ScanBaseline",
    "ScanRecord",
    "SecurityPolicy",
    "SharedReport",
    "SuppressionRule",
    "UsageTracking",
]
