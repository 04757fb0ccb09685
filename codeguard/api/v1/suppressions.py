"""Suppression rule endpoints: accepted-risk exclusions applied to every scan of the account."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_current_account
from codeguard.core.database import get_db
from codeguard.models import SuppressionRule
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.policy import SuppressionCreate, SuppressionOut, SuppressionUpdate

router = APIRouter()


def _get_owned_rule(db: Session, account_id: str, rule_id: int) -> SuppressionRule:
    rule = (
        db.query(SuppressionRule)
        .filter(SuppressionRule.id == rule_id, SuppressionRule.account_id == account_id)
        .first()
    )
    if rule is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Suppression rule not found.",
        )
    return rule


@router.get("", response_model=list[SuppressionOut])
def list_suppressions(
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> list[SuppressionOut]:
    rows = (
        db.query(SuppressionRule)
        .filter(SuppressionRule.account_id == account.account_id)
        .order_by(SuppressionRule.id)
        .all()
    )
    return [SuppressionOut.model_validate(r) for r in rows]


@router.post("", response_model=SuppressionOut, status_code=status.HTTP_201_CREATED)
def create_suppression(
    body: SuppressionCreate,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> SuppressionOut:
    """
    Create a suppression rule.

    issue_type is a kind or '*'; issue_title is a case-insensitive title substring.
    scope=file requires file_path (matched as a substring of the scanned path).
    """
    if body.scope == "file" and not (body.file_path and body.file_path.strip()):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="file_path is required for file-scoped suppressions.",
        )
    rule = SuppressionRule(account_id=account.account_id, **body.model_dump())
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return SuppressionOut.model_validate(rule)


@router.patch("/{rule_id}", response_model=SuppressionOut)
def update_suppression(
    rule_id: int,
    body: SuppressionUpdate,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> SuppressionOut:
    """Toggle, re-expire, or re-justify a rule; matching fields are immutable."""
    rule = _get_owned_rule(db, account.account_id, rule_id)
    # expires_at and reason may be cleared to NULL; is_active is NOT NULL.
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in ("expires_at", "reason")
    }
    for field, value in changes.items():
        setattr(rule, field, value)
    db.commit()
    db.refresh(rule)
    return SuppressionOut.model_validate(rule)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_suppression(
    rule_id: int,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> None:
    rule = _get_owned_rule(db, account.account_id, rule_id)
    db.delete(rule)
    db.commit()
