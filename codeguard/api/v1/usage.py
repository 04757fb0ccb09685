"""Usage endpoint: the calling account's monthly scan counter."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_current_account
from codeguard.core.config import get_settings
from codeguard.core.database import get_db
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.scan import UsageResponse
from codeguard.services.analyzer import billing_period_elapsed
from codeguard.services.errors import PersistenceError
from codeguard.services.store import SqlRecordStore

router = APIRouter()


@router.get("", response_model=UsageResponse)
def get_usage(
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> UsageResponse:
    """
    Current period's usage. Accounts that never scanned report the default free-tier limit.
    A counter from an elapsed billing month is reported as zero (it is reset on the next scan).
    """
    now = datetime.now(timezone.utc)
    try:
        usage = SqlRecordStore(db).get_usage(account.account_id)
    except PersistenceError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.code, "message": e.message},
        ) from e
    if usage is None:
        limit = get_settings().DEFAULT_SCANS_LIMIT
        return UsageResponse(
            account_id=account.account_id,
            scans_this_month=0,
            scans_limit=limit,
            billing_period_start=now,
            scans_remaining=limit,
        )
    used = 0 if billing_period_elapsed(usage.billing_period_start, now) else usage.scans_this_month
    return UsageResponse(
        **usage.model_dump(exclude={"scans_this_month"}),
        scans_this_month=used,
        scans_remaining=max(0, usage.scans_limit - used),
    )
