"""Scan endpoint: run the hybrid static + AI analysis on submitted code."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from codeguard.api.v1.auth import get_scan_account
from codeguard.core.config import get_settings
from codeguard.core.database import get_db
from codeguard.schemas.analysis import AnalysisResult, AnalyzeRequest
from codeguard.schemas.auth import CurrentAccount
from codeguard.services.analyzer import analyze
from codeguard.services.errors import AnalysisError, QuotaExceededError
from codeguard.services.store import SqlRecordStore

router = APIRouter()


def error_detail(e: AnalysisError) -> dict:
    """Response body for a tagged analysis error."""
    detail: dict = {"error": e.code, "message": e.message, "retryable": e.retryable}
    if isinstance(e, QuotaExceededError) and e.limit is not None:
        detail["limit"] = e.limit
    return detail


@router.post("", response_model=AnalysisResult)
async def post_scan(
    body: AnalyzeRequest,
    db: Annotated[Session, Depends(get_db)],
    account: Annotated[CurrentAccount | None, Depends(get_scan_account)],
) -> AnalysisResult:
    """
    Scan code with static rules and the AI reviewer, then fuse, filter, diff, and score.

    Anonymous callers get a stateless result. With an X-API-Key the scan counts against the
    account's monthly quota, honours its policy, suppressions, and baseline, and is diffed
    against the previous scan. Set save_to_history=true to persist the scan record.
    """
    settings = get_settings()
    try:
        return await analyze(
            body.code,
            body.language,
            settings=settings,
            store=SqlRecordStore(db) if account else None,
            account_id=account.account_id if account else None,
            explanation_level=body.explanation_level,
            file_path=body.file_path,
            persist=body.save_to_history,
        )
    except AnalysisError as e:
        raise HTTPException(status_code=e.status_code, detail=error_detail(e)) from e
