"""Baseline endpoints: snapshot a scan's fingerprints as the account's accepted starting point."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_current_account
from codeguard.core.database import get_db
from codeguard.models import ScanBaseline, ScanRecord
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.scan import BaselineCreate, BaselineOut

router = APIRouter()


@router.get("", response_model=list[BaselineOut])
def list_baselines(
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> list[BaselineOut]:
    rows = (
        db.query(ScanBaseline)
        .filter(ScanBaseline.account_id == account.account_id)
        .order_by(ScanBaseline.created_at.desc(), ScanBaseline.id.desc())
        .all()
    )
    return [BaselineOut.model_validate(r) for r in rows]


@router.post("", response_model=BaselineOut, status_code=status.HTTP_201_CREATED)
def create_baseline(
    body: BaselineCreate,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> BaselineOut:
    """
    Create a baseline from one of the account's scans.

    The scan's fingerprints are copied, so deleting the scan later does not change the baseline.
    The new baseline becomes the only active one.
    """
    scan = (
        db.query(ScanRecord)
        .filter(ScanRecord.id == body.scan_id, ScanRecord.account_id == account.account_id)
        .first()
    )
    if scan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Scan not found.")

    db.execute(
        update(ScanBaseline)
        .where(
            ScanBaseline.account_id == account.account_id,
            ScanBaseline.is_active.is_(True),
        )
        .values(is_active=False)
    )
    baseline = ScanBaseline(
        account_id=account.account_id,
        name=body.name,
        baseline_scan_id=scan.id,
        fingerprints=list(scan.fingerprints or []),
        is_active=True,
    )
    db.add(baseline)
    db.commit()
    db.refresh(baseline)
    return BaselineOut.model_validate(baseline)


@router.delete("/{baseline_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_baseline(
    baseline_id: int,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> None:
    baseline = (
        db.query(ScanBaseline)
        .filter(ScanBaseline.id == baseline_id, ScanBaseline.account_id == account.account_id)
        .first()
    )
    if baseline is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Baseline not found.")
    db.delete(baseline)
    db.commit()
