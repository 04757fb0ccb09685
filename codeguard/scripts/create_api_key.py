"""
Issue an API key for an account. Run from project root:
  python -m codeguard.scripts.create_api_key ACCOUNT_ID NAME [--tier free|pro|team] [--limit N]
Example:
  python -m codeguard.scripts.create_api_key acme-corp "CI pipeline" --tier pro --limit 500

The plaintext key is printed once; only its SHA-256 hash is stored.
"""
import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError

from codeguard.core.config import get_settings
from codeguard.core.database import SessionLocal
from codeguard.core.security import (
    KEY_NAME_MAX_LEN,
    KEY_NAME_MIN_LEN,
    generate_api_key,
    hash_api_key,
)
from codeguard.models import ApiKey, UsageTracking

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

TIERS = ("free", "pro", "team")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a CodeGuard API key (no registration UI).")
    parser.add_argument("account_id", help="Account identifier (1-255 chars)")
    parser.add_argument("name", help="Human-readable key name, e.g. 'CI pipeline'")
    parser.add_argument("--tier", default="free", choices=TIERS, help="Subscription tier")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Monthly scan limit for a new account (default: DEFAULT_SCANS_LIMIT)",
    )
    parser.add_argument(
        "--expires-in-days",
        type=int,
        default=None,
        help="Key lifetime in days (default: never expires)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    account_id = args.account_id.strip()
    name = args.name.strip()
    if not account_id or len(account_id) > 255:
        print("Invalid account id length.", file=sys.stderr)
        return 1
    if not (KEY_NAME_MIN_LEN <= len(name) <= KEY_NAME_MAX_LEN):
        print("Invalid key name length.", file=sys.stderr)
        return 1
    if args.limit is not None and args.limit < 0:
        print("Scan limit must be zero or positive.", file=sys.stderr)
        return 1
    if args.expires_in_days is not None and args.expires_in_days < 1:
        print("Key lifetime must be at least one day.", file=sys.stderr)
        return 1

    now = datetime.now(timezone.utc)
    plain_key = generate_api_key()
    db = SessionLocal()
    try:
        db.add(
            ApiKey(
                account_id=account_id,
                name=name,
                key_hash=hash_api_key(plain_key),
                is_active=True,
                expires_at=(
                    now + timedelta(days=args.expires_in_days)
                    if args.expires_in_days
                    else None
                ),
            )
        )
        usage = db.query(UsageTracking).filter(UsageTracking.account_id == account_id).first()
        if usage is None:
            limit = args.limit if args.limit is not None else get_settings().DEFAULT_SCANS_LIMIT
            db.add(
                UsageTracking(
                    account_id=account_id,
                    subscription_tier=args.tier,
                    scans_this_month=0,
                    scans_limit=limit,
                    billing_period_start=now,
                )
            )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Creating API key failed: %s", e)
        return 1
    finally:
        db.close()

    logger.info("Created API key", extra={"account_id": account_id, "key_name": name})
    print(f"Created API key '{name}' for account '{account_id}'. Store it now; it is not shown again:")
    print(plain_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
