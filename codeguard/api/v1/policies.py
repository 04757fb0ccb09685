"""Security policy endpoints. At most one policy per account is active at a time."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_current_account
from codeguard.core.database import get_db
from codeguard.models import SecurityPolicy
from codeguard.schemas.auth import CurrentAccount
from codeguard.schemas.policy import PolicyCreate, PolicyOut, PolicyUpdate

router = APIRouter()


def _deactivate_others(db: Session, account_id: str, keep_id: int | None) -> None:
    stmt = update(SecurityPolicy).where(
        SecurityPolicy.account_id == account_id,
        SecurityPolicy.is_active.is_(True),
    )
    if keep_id is not None:
        stmt = stmt.where(SecurityPolicy.id != keep_id)
    db.execute(stmt.values(is_active=False))


def _get_owned_policy(db: Session, account_id: str, policy_id: int) -> SecurityPolicy:
    policy = (
        db.query(SecurityPolicy)
        .filter(SecurityPolicy.id == policy_id, SecurityPolicy.account_id == account_id)
        .first()
    )
    if policy is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Policy not found.")
    return policy


@router.get("", response_model=list[PolicyOut])
def list_policies(
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> list[PolicyOut]:
    rows = (
        db.query(SecurityPolicy)
        .filter(SecurityPolicy.account_id == account.account_id)
        .order_by(SecurityPolicy.created_at.desc(), SecurityPolicy.id.desc())
        .all()
    )
    return [PolicyOut.model_validate(r) for r in rows]


@router.post("", response_model=PolicyOut, status_code=status.HTTP_201_CREATED)
def create_policy(
    body: PolicyCreate,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> PolicyOut:
    """Create a policy. If it is created active, every other policy of the account is deactivated."""
    if body.is_active:
        _deactivate_others(db, account.account_id, keep_id=None)
    policy = SecurityPolicy(account_id=account.account_id, **body.model_dump())
    db.add(policy)
    db.commit()
    db.refresh(policy)
    return PolicyOut.model_validate(policy)


@router.patch("/{policy_id}", response_model=PolicyOut)
def update_policy(
    policy_id: int,
    body: PolicyUpdate,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> PolicyOut:
    """Update provided fields only. Activating a policy deactivates the others."""
    policy = _get_owned_policy(db, account.account_id, policy_id)
    # max_low may be cleared to NULL (unlimited); other columns are NOT NULL.
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field == "max_low"
    }
    if changes.get("is_active"):
        _deactivate_others(db, account.account_id, keep_id=policy.id)
    for field, value in changes.items():
        setattr(policy, field, value)
    db.commit()
    db.refresh(policy)
    return PolicyOut.model_validate(policy)


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy(
    policy_id: int,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount, Depends(get_current_account)],
) -> None:
    policy = _get_owned_policy(db, account.account_id, policy_id)
    db.delete(policy)
    db.commit()
