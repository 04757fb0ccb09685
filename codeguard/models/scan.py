"""ORM models for persisted scan history, fingerprint baselines, and shared report links."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB

from codeguard.models.base import Base


class ScanRecord(Base):
    """
    One completed analysis. Append-only: rows are never updated after insert,
    only deleted wholesale on explicit user request.
    """

    __tablename__ = "scan_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, index=True)
    code_hash = Column(String(64), nullable=False)
    language = Column(String(64), nullable=False)
    summary = Column(Text, nullable=True)
    score = Column(Integer, nullable=False)
    issues_count = Column(Integer, nullable=False, default=0)
    critical_count = Column(Integer, nullable=False, default=0)
    high_count = Column(Integer, nullable=False, default=0)
    medium_count = Column(Integer, nullable=False, default=0)
    low_count = Column(Integer, nullable=False, default=0)
    issues = Column(JSONB, nullable=False, default=list)
    static_checks = Column(JSONB, nullable=True)
    fixed_code = Column(Text, nullable=True)
    fingerprints = Column(JSONB, nullable=False, default=list)
    previous_scan_id = Column(
        Integer,
        ForeignKey("scan_history.id", ondelete="SET NULL"),
        nullable=True,
    )
    new_issues_count = Column(Integer, nullable=True)
    fixed_issues_count = Column(Integer, nullable=True)
    policy_id = Column(Integer, nullable=True)
    policy_passed = Column(Boolean, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )


class ScanBaseline(Base):
    """Named snapshot of one scan's fingerprints; at most one active per account."""

    __tablename__ = "scan_baselines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="Baseline")
    baseline_scan_id = Column(
        Integer,
        ForeignKey("scan_history.id", ondelete="SET NULL"),
        nullable=True,
    )
    fingerprints = Column(JSONB, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class SharedReport(Base):
    """
    Read-only public link to one scan. Anyone holding share_token can view the scan until
    expires_at (never, when NULL). Deleting the scan deletes its links.
    """

    __tablename__ = "shared_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, index=True)
    scan_id = Column(
        Integer,
        ForeignKey("scan_history.id", ondelete="CASCADE"),
        nullable=False,
    )
    share_token = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
