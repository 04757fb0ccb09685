"""ORM models for account-level security policies and suppression rules."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB

from codeguard.models.base import Base


class SecurityPolicy(Base):
    """Severity-count thresholds gating pass/fail; at most one active per account."""

    __tablename__ = "security_policies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="Default Policy")
    is_active = Column(Boolean, nullable=False, default=True)
    max_critical = Column(Integer, nullable=False, default=0)
    max_high = Column(Integer, nullable=False, default=0)
    max_medium = Column(Integer, nullable=False, default=5)
    # NULL means unlimited low-severity findings.
    max_low = Column(Integer, nullable=True)
    ignore_paths = Column(JSONB, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class SuppressionRule(Base):
    """Account-level exclusion filter for accepted findings."""

    __tablename__ = "suppression_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, index=True)
    issue_type = Column(String(32), nullable=False)
    issue_title = Column(String(512), nullable=True)
    scope = Column(String(16), nullable=False, default="global")
    file_path = Column(String(2048), nullable=True)
    reason = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
