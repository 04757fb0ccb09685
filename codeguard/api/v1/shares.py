"""Shared report links: owners mint read-only tokens for a scan; anyone with the token can view it."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_current_account
from codeguard.core.database import get_db
from codeguard.core.security import generate_share_token
from codeguard.models import ScanRecord, SharedReport
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.scan import ScanDetail, ShareCreate, SharedReportView, ShareOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shared report not found.")


def link_expired(expires_at: datetime | None, now: datetime) -> bool:
    """Naive timestamps are UTC. A link is dead from its expiry instant onward."""
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= now


@router.get("", response_model=list[ShareOut])
def list_shares(
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> list[ShareOut]:
    rows = (
        db.query(SharedReport)
        .filter(SharedReport.account_id == account.account_id)
        .order_by(SharedReport.created_at.desc(), SharedReport.id.desc())
        .all()
    )
    return [ShareOut.model_validate(r) for r in rows]


@router.post("", response_model=ShareOut, status_code=status.HTTP_201_CREATED)
def create_share(
    body: ShareCreate,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> ShareOut:
    """Create a share link for one of the account's scans. 404 if the scan is not the caller's."""
    scan = (
        db.query(ScanRecord)
        .filter(ScanRecord.id == body.scan_id, ScanRecord.account_id == account.account_id)
        .first()
    )
    if scan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Scan not found.")

    expires_at = None
    if body.expires_in_days is not None:
        expires_at = datetime.now(timezone.utc) + timedelta(days=body.expires_in_days)
    share = SharedReport(
        account_id=account.account_id,
        scan_id=scan.id,
        share_token=generate_share_token(),
        expires_at=expires_at,
        view_count=0,
    )
    db.add(share)
    db.commit()
    db.refresh(share)
    logger.info(
        "Share link created",
        extra={"scan_id": scan.id, "expires_at": expires_at.isoformat() if expires_at else None},
    )
    return ShareOut.model_validate(share)


@router.get("/{token}", response_model=SharedReportView)
def view_shared_report(
    token: str,
    db: Annotated[Session, Depends(get_db)],
) -> SharedReportView:
    """
    Public, unauthenticated view of a shared scan.

    404 for unknown tokens, 410 once the link has expired. Each successful view bumps view_count.
    """
    share = db.query(SharedReport).filter(SharedReport.share_token == token).first()
    if share is None:
        raise _not_found()
    if link_expired(share.expires_at, datetime.now(timezone.utc)):
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="This share link has expired.")
    scan = db.query(ScanRecord).filter(ScanRecord.id == share.scan_id).first()
    if scan is None:
        raise _not_found()

    view = SharedReportView(
        scan=ScanDetail.model_validate(scan),
        expires_at=share.expires_at,
        view_count=(share.view_count or 0) + 1,
    )
    db.execute(
        update(SharedReport)
        .where(SharedReport.id == share.id)
        .values(view_count=SharedReport.view_count + 1)
    )
    db.commit()
    return view


@router.delete("/{token}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_share(
    token: str,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> None:
    share = (
        db.query(SharedReport)
        .filter(SharedReport.share_token == token, SharedReport.account_id == account.account_id)
        .first()
    )
    if share is None:
        raise _not_found()
    db.delete(share)
    db.commit()
