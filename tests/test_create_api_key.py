"""create_api_key CLI: argument validation and rows written (session mocked)."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import MagicMock, patch

from codeguard.core.security import API_KEY_PREFIX, hash_api_key
from codeguard.models import ApiKey, UsageTracking
from codeguard.scripts.create_api_key import main


class TestCreateApiKey(unittest.TestCase):
    @patch("codeguard.scripts.create_api_key.SessionLocal")
    def test_creates_key_and_usage_row(self, mock_session_local: MagicMock) -> None:
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        mock_session_local.return_value = db

        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["acme", "CI pipeline", "--tier", "pro", "--limit", "500"])

        self.assertEqual(code, 0)
        plain_key = out.getvalue().strip().splitlines()[-1]
        self.assertTrue(plain_key.startswith(API_KEY_PREFIX))

        added = [c.args[0] for c in db.add.call_args_list]
        api_key = next(a for a in added if isinstance(a, ApiKey))
        usage = next(a for a in added if isinstance(a, UsageTracking))
        self.assertEqual(api_key.key_hash, hash_api_key(plain_key))
        self.assertEqual(api_key.account_id, "acme")
        self.assertEqual((usage.subscription_tier, usage.scans_limit), ("pro", 500))
        db.commit.assert_called_once()
        db.close.assert_called_once()

    @patch("codeguard.scripts.create_api_key.SessionLocal")
    def test_existing_usage_row_is_kept(self, mock_session_local: MagicMock) -> None:
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = MagicMock()
        mock_session_local.return_value = db
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main(["acme", "second key"]), 0)
        self.assertEqual(db.add.call_count, 1)

    @patch("codeguard.scripts.create_api_key.SessionLocal")
    def test_blank_name_is_rejected(self, mock_session_local: MagicMock) -> None:
        with redirect_stderr(io.StringIO()):
            self.assertEqual(main(["acme", "   "]), 1)
        mock_session_local.assert_not_called()


if __name__ == "__main__":
    unittest.main()
