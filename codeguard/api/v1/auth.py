"""API key auth dependencies (get_optional_account, get_current_account, get_scan_account)."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codeguard.core.config import get_settings
from codeguard.core.database import get_db
from codeguard.core.security import hash_api_key
from codeguard.models import ApiKey
from codeguard.schemas.auth import CurrentAccount

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


def resolve_api_key(db: Session, plain_key: str, now: datetime | None = None) -> CurrentAccount:
    """
    Look up a plaintext key by hash; reject inactive or expired keys.
    Records last_used_at on success. Raises 401 HTTPException otherwise.
    """
    now = now or datetime.now(timezone.utc)
    key = db.query(ApiKey).filter(ApiKey.key_hash == hash_api_key(plain_key)).first()
    if key is None:
        raise _unauthorized("Invalid API key")
    if not key.is_active:
        raise _unauthorized("API key is inactive")
    if key.expires_at is not None:
        expires_at = key.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= now:
            raise _unauthorized("API key has expired")

    key.last_used_at = now
    try:
        db.commit()
    except SQLAlchemyError:
        # last_used_at is best-effort.
        db.rollback()
        logger.warning("Could not update last_used_at", extra={"key_id": key.id})
    return CurrentAccount(account_id=key.account_id, key_id=key.id, key_name=key.name)


def get_optional_account(
    api_key: Annotated[str | None, Depends(api_key_header)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentAccount | None:
    """Dependency: resolve the X-API-Key header if present; None for anonymous callers."""
    if not api_key:
        return None
    return resolve_api_key(db, api_key)


def get_current_account(
    account: Annotated[CurrentAccount | None, Depends(get_optional_account)],
) -> CurrentAccount:
    """Dependency: require a valid X-API-Key. Raises 401 if missing or invalid."""
    if account is None:
        raise _unauthorized("Not authenticated")
    return account


def get_scan_account(
    account: Annotated[CurrentAccount | None, Depends(get_optional_account)],
) -> CurrentAccount | None:
    """Dependency for POST /scan: anonymous allowed unless AUTH_ENABLED is set."""
    if account is None and get_settings().AUTH_ENABLED:
        raise _unauthorized("Not authenticated")
    return account
