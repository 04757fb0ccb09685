"""Account management endpoints: policies, suppressions, baselines, history, shared links, usage, health (route functions called directly, DB mocked)."""

import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from codeguard.api.v1.baselines import create_baseline
from codeguard.api.v1.health import get_health
from codeguard.api.v1.history import get_scan, list_history
from codeguard.api.v1.policies import create_policy, update_policy
from codeguard.api.v1.shares import create_share, link_expired, view_shared_report
from codeguard.api.v1.suppressions import create_suppression, update_suppression
from codeguard.api.v1.usage import get_usage
from codeguard.core.database import database_status
from codeguard.models import ScanBaseline, SecurityPolicy, SharedReport
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.policy import PolicyCreate, PolicyUpdate, SuppressionCreate, SuppressionUpdate
from codeguard.schemas.scan import BaselineCreate, ShareCreate, UsageSnapshot

ACCOUNT = CurrentAccount(account_id="acct", key_id=1, key_name="CI")
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _db(first: object = None, new_id: int = 7) -> MagicMock:
    """Session whose owned-row lookup returns `first` and whose refresh assigns an id."""
    db = MagicMock()
    db.query.return_value.filter.return_value.first.return_value = first

    def refresh(obj: object) -> None:
        if getattr(obj, "id", None) is None:
            obj.id = new_id

    db.refresh.side_effect = refresh
    return db


def _update_params(db: MagicMock) -> dict:
    stmt = db.execute.call_args[0][0]
    return stmt.compile().params


def _policy(**kwargs: object) -> SimpleNamespace:
    defaults = {
        "id": 3,
        "name": "Strict",
        "is_active": False,
        "max_critical": 0,
        "max_high": 0,
        "max_medium": 5,
        "max_low": 10,
        "ignore_paths": [],
        "created_at": NOW,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def _scan_row(**kwargs: object) -> SimpleNamespace:
    defaults = {
        "id": 5,
        "language": "python",
        "score": 80,
        "summary": "ok",
        "issues_count": 1,
        "critical_count": 0,
        "high_count": 1,
        "medium_count": 0,
        "low_count": 0,
        "new_issues_count": None,
        "fixed_issues_count": None,
        "policy_passed": True,
        "created_at": NOW,
        "code_hash": "a" * 64,
        "issues": [],
        "static_checks": [],
        "fixed_code": None,
        "fingerprints": ["0123456789abcdef"],
        "previous_scan_id": None,
        "policy_id": None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestPolicies(unittest.TestCase):
    def test_active_policy_deactivates_others_before_insert(self) -> None:
        db = _db()
        out = create_policy(PolicyCreate(name="Strict", ignore_paths=[" tests/ ", ""]), db, ACCOUNT)

        self.assertEqual(out.id, 7)
        self.assertTrue(out.is_active)
        self.assertEqual(out.ignore_paths, ["tests/"])
        params = _update_params(db)
        self.assertIn("acct", params.values())
        self.assertIs(params["is_active"], False)
        names = [c[0] for c in db.mock_calls]
        self.assertLess(names.index("execute"), names.index("add"))
        self.assertIsInstance(db.add.call_args[0][0], SecurityPolicy)

    def test_inactive_policy_leaves_others_alone(self) -> None:
        db = _db()
        create_policy(PolicyCreate(name="Draft", is_active=False), db, ACCOUNT)
        db.execute.assert_not_called()

    def test_activation_by_patch_keeps_the_patched_policy(self) -> None:
        policy = _policy()
        db = _db(first=policy)
        out = update_policy(3, PolicyUpdate(is_active=True), db, ACCOUNT)

        self.assertTrue(out.is_active)
        params = _update_params(db)
        self.assertIn(3, params.values())
        self.assertIn("acct", params.values())

    def test_patch_can_clear_max_low_but_not_other_fields(self) -> None:
        policy = _policy()
        db = _db(first=policy)
        body = PolicyUpdate.model_validate({"max_low": None, "name": None, "max_high": 2})
        out = update_policy(3, body, db, ACCOUNT)

        self.assertIsNone(out.max_low)
        self.assertEqual(out.name, "Strict")
        self.assertEqual(out.max_high, 2)
        db.execute.assert_not_called()
        db.commit.assert_called_once()

    def test_patch_unknown_policy_is_404(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            update_policy(99, PolicyUpdate(name="x"), _db(first=None), ACCOUNT)
        self.assertEqual(ctx.exception.status_code, 404)


class TestSuppressions(unittest.TestCase):
    def _rule(self, **kwargs: object) -> SimpleNamespace:
        defaults = {
            "id": 4,
            "issue_type": "vulnerability",
            "issue_title": "eval",
            "scope": "global",
            "file_path": None,
            "reason": "Sandboxed",
            "is_active": True,
            "expires_at": NOW,
            "created_at": NOW,
        }
        defaults.update(kwargs)
        return SimpleNamespace(**defaults)

    def test_null_is_active_is_ignored(self) -> None:
        rule = self._rule()
        db = _db(first=rule)
        body = SuppressionUpdate.model_validate({"is_active": None})
        out = update_suppression(4, body, db, ACCOUNT)

        self.assertTrue(rule.is_active)
        self.assertTrue(out.is_active)
        db.commit.assert_called_once()

    def test_expiry_and_reason_can_be_cleared(self) -> None:
        rule = self._rule()
        body = SuppressionUpdate.model_validate({"expires_at": None, "reason": None, "is_active": False})
        out = update_suppression(4, body, _db(first=rule), ACCOUNT)

        self.assertIsNone(rule.expires_at)
        self.assertIsNone(rule.reason)
        self.assertFalse(out.is_active)

    def test_file_scope_requires_path(self) -> None:
        db = _db()
        with self.assertRaises(HTTPException) as ctx:
            create_suppression(SuppressionCreate(issue_type="*", scope="file"), db, ACCOUNT)
        self.assertEqual(ctx.exception.status_code, 422)
        db.add.assert_not_called()

    def test_create_normalizes_issue_type(self) -> None:
        out = create_suppression(
            SuppressionCreate(issue_type=" Code_Smell ", issue_title="TODO"), _db(), ACCOUNT
        )
        self.assertEqual(out.issue_type, "code_smell")
        self.assertEqual(out.id, 7)


class TestBaselines(unittest.TestCase):
    def test_baseline_copies_fingerprints_and_is_sole_active(self) -> None:
        fingerprints = ["0123456789abcdef", "fedcba9876543210"]
        scan = SimpleNamespace(id=5, fingerprints=fingerprints)
        db = _db(first=scan, new_id=11)
        out = create_baseline(BaselineCreate(scan_id=5, name="Release 1"), db, ACCOUNT)

        self.assertEqual(out.id, 11)
        self.assertEqual(out.baseline_scan_id, 5)
        self.assertEqual(out.fingerprints, fingerprints)
        self.assertTrue(out.is_active)

        added = db.add.call_args[0][0]
        self.assertIsInstance(added, ScanBaseline)
        self.assertIsNot(added.fingerprints, fingerprints)
        params = _update_params(db)
        self.assertIn("acct", params.values())
        self.assertIs(params["is_active"], False)

    def test_scan_of_another_account_is_404(self) -> None:
        db = _db(first=None)
        with self.assertRaises(HTTPException) as ctx:
            create_baseline(BaselineCreate(scan_id=5), db, ACCOUNT)
        self.assertEqual(ctx.exception.status_code, 404)
        db.execute.assert_not_called()
        db.add.assert_not_called()


class TestHistory(unittest.TestCase):
    def test_list_passes_paging_through(self) -> None:
        row = _scan_row(id=1)
        db = MagicMock()
        query = db.query.return_value.filter.return_value.order_by.return_value
        query.offset.return_value.limit.return_value.all.return_value = [row]

        out = list_history(db, ACCOUNT, limit=5, offset=10)

        self.assertEqual([s.id for s in out.scans], [1])
        self.assertEqual((out.limit, out.offset), (5, 10))
        query.offset.assert_called_once_with(10)
        query.offset.return_value.limit.assert_called_once_with(5)

    def test_missing_scan_is_404(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            get_scan(42, _db(first=None), ACCOUNT)
        self.assertEqual(ctx.exception.detail, "Scan not found.")


class TestUsage(unittest.TestCase):
    def _snapshot(self, start: datetime, used: int = 8) -> UsageSnapshot:
        return UsageSnapshot(
            account_id="acct",
            subscription_tier="free",
            scans_this_month=used,
            scans_limit=10,
            billing_period_start=start,
        )

    @patch("codeguard.api.v1.usage.SqlRecordStore")
    def test_current_period_reports_remaining(self, mock_store: MagicMock) -> None:
        start = datetime.now(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        mock_store.return_value.get_usage.return_value = self._snapshot(start)
        out = get_usage(MagicMock(), ACCOUNT)
        self.assertEqual((out.scans_this_month, out.scans_remaining), (8, 2))

    @patch("codeguard.api.v1.usage.SqlRecordStore")
    def test_elapsed_period_reports_zero_used(self, mock_store: MagicMock) -> None:
        mock_store.return_value.get_usage.return_value = self._snapshot(
            datetime(2020, 1, 1, tzinfo=timezone.utc), used=10
        )
        out = get_usage(MagicMock(), ACCOUNT)
        self.assertEqual((out.scans_this_month, out.scans_remaining), (0, 10))

    @patch("codeguard.api.v1.usage.get_settings")
    @patch("codeguard.api.v1.usage.SqlRecordStore")
    def test_missing_row_reports_default_limit(
        self, mock_store: MagicMock, mock_settings: MagicMock
    ) -> None:
        mock_store.return_value.get_usage.return_value = None
        mock_settings.return_value.DEFAULT_SCANS_LIMIT = 25
        out = get_usage(MagicMock(), ACCOUNT)
        self.assertEqual((out.scans_this_month, out.scans_limit, out.scans_remaining), (0, 25, 25))


class TestSharedReports(unittest.TestCase):
    def test_create_share_for_owned_scan(self) -> None:
        db = _db(first=_scan_row(), new_id=9)
        before = datetime.now(timezone.utc)
        out = create_share(ShareCreate(scan_id=5, expires_in_days=7), db, ACCOUNT)

        self.assertEqual((out.id, out.scan_id, out.view_count), (9, 5, 0))
        self.assertGreaterEqual(len(out.share_token), 32)
        self.assertGreaterEqual(out.expires_at, before + timedelta(days=7))
        self.assertIsInstance(db.add.call_args[0][0], SharedReport)
        db.commit.assert_called_once()

    def test_share_without_expiry_never_expires(self) -> None:
        out = create_share(ShareCreate(scan_id=5), _db(first=_scan_row()), ACCOUNT)
        self.assertIsNone(out.expires_at)
        self.assertFalse(link_expired(out.expires_at, NOW))

    def test_tokens_are_unique_per_link(self) -> None:
        first = create_share(ShareCreate(scan_id=5), _db(first=_scan_row()), ACCOUNT)
        second = create_share(ShareCreate(scan_id=5), _db(first=_scan_row()), ACCOUNT)
        self.assertNotEqual(first.share_token, second.share_token)

    def test_share_of_another_accounts_scan_is_404(self) -> None:
        db = _db(first=None)
        with self.assertRaises(HTTPException) as ctx:
            create_share(ShareCreate(scan_id=5), db, ACCOUNT)
        self.assertEqual(ctx.exception.status_code, 404)
        db.add.assert_not_called()

    def test_view_returns_scan_and_counts_the_view(self) -> None:
        share = SimpleNamespace(id=9, scan_id=5, expires_at=None, view_count=2)
        db = MagicMock()
        db.query.return_value.filter.return_value.first.side_effect = [share, _scan_row()]

        view = view_shared_report("tok", db)

        self.assertEqual(view.scan.id, 5)
        self.assertEqual(view.scan.fingerprints, ["0123456789abcdef"])
        self.assertEqual(view.view_count, 3)
        self.assertIn(9, _update_params(db).values())
        db.commit.assert_called_once()

    def test_expired_link_is_410(self) -> None:
        share = SimpleNamespace(id=9, scan_id=5, expires_at=datetime(2020, 1, 1), view_count=0)
        db = _db(first=share)
        with self.assertRaises(HTTPException) as ctx:
            view_shared_report("tok", db)
        self.assertEqual(ctx.exception.status_code, 410)
        db.execute.assert_not_called()

    def test_unknown_token_is_404(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            view_shared_report("nope", _db(first=None))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_expiry_instant_is_already_expired(self) -> None:
        self.assertTrue(link_expired(NOW, NOW))
        self.assertFalse(link_expired(NOW + timedelta(seconds=1), NOW))


class TestHealth(unittest.TestCase):
    @patch("codeguard.core.database.inspect")
    def test_all_tables_present_is_connected(self, mock_inspect: MagicMock) -> None:
        mock_inspect.return_value.has_table.return_value = True
        self.assertEqual(database_status(MagicMock()), "connected")

    @patch("codeguard.core.database.inspect")
    def test_missing_table_is_unmigrated(self, mock_inspect: MagicMock) -> None:
        mock_inspect.return_value.has_table.side_effect = lambda name: name != "scan_history"
        self.assertEqual(database_status(MagicMock()), "unmigrated")

    def test_connection_error_is_disconnected(self) -> None:
        db = MagicMock()
        db.connection.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        self.assertEqual(database_status(db), "disconnected")

    @patch("codeguard.api.v1.health.get_settings")
    @patch("codeguard.api.v1.health.database_status", return_value="unmigrated")
    def test_health_is_degraded_without_schema(
        self, _mock_status: MagicMock, mock_settings: MagicMock
    ) -> None:
        mock_settings.return_value.APP_ENV = "prod"
        mock_settings.return_value.AUTH_ENABLED = True
        mock_settings.return_value.AI_MODEL = "llama3.2"
        out = get_health(MagicMock())
        self.assertEqual((out.status, out.database), ("degraded", "unmigrated"))
        self.assertTrue(out.auth_enabled)
        self.assertEqual(out.ai_model, "llama3.2")


if __name__ == "__main__":
    unittest.main()
