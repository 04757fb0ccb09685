"""Scan history endpoints: list, fetch, and delete persisted scans of the calling account."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_current_account
from codeguard.core.database import get_db
from codeguard.models import ScanRecord
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.scan import HistoryResponse, ScanDetail, ScanSummary

router = APIRouter()


def _get_owned_scan(db: Session, account_id: str, scan_id: int) -> ScanRecord:
    scan = (
        db.query(ScanRecord)
        .filter(ScanRecord.id == scan_id, ScanRecord.account_id == account_id)
        .first()
    )
    if scan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Scan not found.")
    return scan


@router.get("", response_model=HistoryResponse)
def list_history(
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> HistoryResponse:
    """List scan summaries, newest first."""
    rows = (
        db.query(ScanRecord)
        .filter(ScanRecord.account_id == account.account_id)
        .order_by(ScanRecord.created_at.desc(), ScanRecord.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return HistoryResponse(
        scans=[ScanSummary.model_validate(r) for r in rows],
        limit=limit,
        offset=offset,
    )


@router.get("/{scan_id}", response_model=ScanDetail)
def get_scan(
    scan_id: int,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> ScanDetail:
    """Full scan record, including findings and fingerprints."""
    return ScanDetail.model_validate(_get_owned_scan(db, account.account_id, scan_id))


@router.delete("/{scan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_scan(
    scan_id: int,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> None:
    """Delete one scan record. Later scans that referenced it get previous_scan_id set to NULL."""
    scan = _get_owned_scan(db, account.account_id, scan_id)
    db.delete(scan)
    db.commit()
