"""ORM models for caller identity (API keys) and per-account scan usage."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, func

from codeguard.models.base import Base


class ApiKey(Base):
    """
    API key issued to an account. Only the SHA-256 hash of the key is stored.

    Keys are created via the create_api_key script; there is no registration UI.
    """

    __tablename__ = "api_keys"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    key_hash = Column(String(64), nullable=False, unique=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class UsageTracking(Base):
    """
    Monthly scan counter for one account.

    scans_this_month is only changed through a guarded atomic UPDATE (see SqlRecordStore).
    """

    __tablename__ = "usage_tracking"
    __table_args__ = (
        CheckConstraint("scans_this_month >= 0", name="ck_usage_tracking_scans_nonnegative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(255), nullable=False, unique=True, index=True)
    subscription_tier = Column(String(32), nullable=False, default="free")
    scans_this_month = Column(Integer, nullable=False, default=0)
    scans_limit = Column(Integer, nullable=False, default=10)
    billing_period_start = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
