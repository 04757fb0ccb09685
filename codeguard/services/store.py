"""Record store: the narrow read/write contract the analyzer needs, and its SQLAlchemy implementation."""

import logging
from datetime import datetime
from typing import Protocol

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codeguard.models import (
    ScanBaseline,
    ScanRecord,
    SecurityPolicy,
    SuppressionRule,
    UsageTracking,
)
from codeguard.schemas.policy import PolicyConfig, SuppressionRuleConfig
from codeguard.schemas.scan import PreviousScan, ScanRecordCreate, UsageSnapshot
from codeguard.services.errors import PersistenceError, QuotaExceededError

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Per-account reads and the single write performed at the end of an analysis."""

    def get_usage(self, account_id: str) -> UsageSnapshot | None: ...

    def reset_usage_period(self, account_id: str, now: datetime) -> None: ...

    def get_active_policy(self, account_id: str) -> PolicyConfig | None: ...

    def list_active_suppressions(self, account_id: str) -> list[SuppressionRuleConfig]: ...

    def get_latest_scan(self, account_id: str) -> PreviousScan | None: ...

    def get_active_baseline(self, account_id: str) -> list[str] | None: ...

    def record_scan(
        self,
        account_id: str,
        record: ScanRecordCreate | None,
        default_limit: int,
        now: datetime,
    ) -> int | None: ...


class SqlRecordStore:
    """RecordStore over a SQLAlchemy session. SQLAlchemy errors surface as PersistenceError."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_usage(self, account_id: str) -> UsageSnapshot | None:
        try:
            row = (
                self.session.query(UsageTracking)
                .filter(UsageTracking.account_id == account_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load usage counter.", cause=e) from e
        return UsageSnapshot.model_validate(row) if row is not None else None

    def reset_usage_period(self, account_id: str, now: datetime) -> None:
        """Roll the monthly counter over to a new billing period starting at `now`."""
        try:
            self.session.execute(
                update(UsageTracking)
                .where(UsageTracking.account_id == account_id)
                .values(scans_this_month=0, billing_period_start=now)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError("Could not reset usage counter.", cause=e) from e
        logger.info("Usage period rolled over", extra={"account_id": account_id})

    def get_active_policy(self, account_id: str) -> PolicyConfig | None:
        try:
            row = (
                self.session.query(SecurityPolicy)
                .filter(
                    SecurityPolicy.account_id == account_id,
                    SecurityPolicy.is_active.is_(True),
                )
                .order_by(SecurityPolicy.created_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load security policy.", cause=e) from e
        return PolicyConfig.model_validate(row) if row is not None else None

    def list_active_suppressions(self, account_id: str) -> list[SuppressionRuleConfig]:
        try:
            rows = (
                self.session.query(SuppressionRule)
                .filter(
                    SuppressionRule.account_id == account_id,
                    SuppressionRule.is_active.is_(True),
                )
                .order_by(SuppressionRule.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load suppression rules.", cause=e) from e
        return [SuppressionRuleConfig.model_validate(r) for r in rows]

    def get_latest_scan(self, account_id: str) -> PreviousScan | None:
        try:
            row = (
                self.session.query(ScanRecord.id, ScanRecord.fingerprints)
                .filter(ScanRecord.account_id == account_id)
                .order_by(ScanRecord.created_at.desc(), ScanRecord.id.desc())
                .first()
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load previous scan.", cause=e) from e
        if row is None:
            return None
        return PreviousScan(id=row.id, fingerprints=list(row.fingerprints or []))

    def get_active_baseline(self, account_id: str) -> list[str] | None:
        try:
            row = (
                self.session.query(ScanBaseline.fingerprints)
                .filter(
                    ScanBaseline.account_id == account_id,
                    ScanBaseline.is_active.is_(True),
                )
                .order_by(ScanBaseline.created_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load baseline.", cause=e) from e
        if row is None:
            return None
        return list(row.fingerprints or [])

    def record_scan(
        self,
        account_id: str,
        record: ScanRecordCreate | None,
        default_limit: int,
        now: datetime,
    ) -> int | None:
        """
        Count one scan against the account and optionally insert its record, in one transaction.

        The increment is a conditional UPDATE guarded by scans_this_month < scans_limit, so two
        concurrent scans cannot both take the last slot. When the guard fails nothing is written
        and QuotaExceededError is raised. Accounts without a usage row get one with default_limit.
        Returns the new scan id, or None when no record was given.
        """
        try:
            result = self.session.execute(
                update(UsageTracking)
                .where(
                    UsageTracking.account_id == account_id,
                    UsageTracking.scans_this_month < UsageTracking.scans_limit,
                )
                .values(scans_this_month=UsageTracking.scans_this_month + 1)
            )
            if result.rowcount == 0:
                existing = (
                    self.session.query(UsageTracking.scans_limit)
                    .filter(UsageTracking.account_id == account_id)
                    .first()
                )
                limit = existing.scans_limit if existing is not None else default_limit
                if existing is not None or default_limit < 1:
                    self.session.rollback()
                    raise QuotaExceededError("Monthly scan limit reached.", limit=limit)
                self.session.add(
                    UsageTracking(
                        account_id=account_id,
                        scans_this_month=1,
                        scans_limit=default_limit,
                        billing_period_start=now,
                    )
                )

            scan_id: int | None = None
            if record is not None:
                row = ScanRecord(account_id=account_id, **record.model_dump())
                self.session.add(row)
                self.session.flush()
                scan_id = row.id
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError("Could not save scan.", cause=e) from e
        return scan_id
