"""Analysis orchestrator: quota, context loading, detectors, fusion, suppression, diff, policy, score, persist."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from codeguard.core.security import hash_code
from codeguard.schemas.analysis import AIReview, AnalysisResult, ConfidenceDistribution
from codeguard.schemas.findings import Finding
from codeguard.schemas.policy import PolicyConfig, SuppressionRuleConfig
from codeguard.schemas.scan import PreviousScan, ScanRecordCreate
from codeguard.services.ai_reviewer import run_ai_review
from codeguard.services.diff import compute_diff, count_new_since_baseline
from codeguard.services.errors import (
    InvalidInputError,
    ModelUnavailableError,
    PersistenceError,
    QuotaExceededError,
)
from codeguard.services.fusion import fuse_findings
from codeguard.services.policy import count_severities, evaluate_policy
from codeguard.services.scanner import run_static_checks
from codeguard.services.scoring import compute_score
from codeguard.services.suppression import apply_suppressions

if TYPE_CHECKING:
    from codeguard.core.config import Settings
    from codeguard.services.store import RecordStore

logger = logging.getLogger(__name__)

# (code, language, explanation_level, known_titles, settings) -> AIReview
Reviewer = Callable[..., Awaitable[AIReview]]


@dataclass
class AccountContext:
    """Everything loaded from the store for one account before analysis starts."""

    policy: PolicyConfig | None = None
    suppressions: list[SuppressionRuleConfig] = field(default_factory=list)
    previous_scan: PreviousScan | None = None
    baseline: list[str] | None = None


def validate_input(code: str | None, language: str | None, settings: "Settings") -> None:
    """Reject missing or oversized input before any external call or quota use."""
    if not code or not code.strip() or not language or not language.strip():
        raise InvalidInputError("Code and language are required.")
    if len(code) > settings.MAX_CODE_CHARS:
        raise InvalidInputError(
            f"Code exceeds the maximum of {settings.MAX_CODE_CHARS} characters."
        )


def billing_period_elapsed(period_start: datetime, now: datetime) -> bool:
    """A billing period is a calendar month (UTC)."""
    if period_start.tzinfo is None:
        period_start = period_start.replace(tzinfo=timezone.utc)
    start = period_start.astimezone(timezone.utc)
    current = now.astimezone(timezone.utc)
    return (start.year, start.month) != (current.year, current.month)


def check_quota(store: "RecordStore", account_id: str, now: datetime) -> None:
    """Roll the counter over if the period elapsed; raise QuotaExceededError if at/over limit."""
    usage = store.get_usage(account_id)
    if usage is None:
        return
    if billing_period_elapsed(usage.billing_period_start, now):
        store.reset_usage_period(account_id, now)
        return
    if usage.scans_this_month >= usage.scans_limit:
        raise QuotaExceededError("Monthly scan limit reached.", limit=usage.scans_limit)


def load_account_context(store: "RecordStore", account_id: str) -> AccountContext:
    return AccountContext(
        policy=store.get_active_policy(account_id),
        suppressions=store.list_active_suppressions(account_id),
        previous_scan=store.get_latest_scan(account_id),
        baseline=store.get_active_baseline(account_id),
    )


async def _review(
    reviewer: Reviewer,
    code: str,
    language: str,
    explanation_level: str,
    known_titles: list[str],
    settings: "Settings",
) -> AIReview:
    try:
        return await asyncio.wait_for(
            reviewer(code, language, explanation_level, known_titles, settings),
            timeout=settings.AI_REQUEST_TIMEOUT_SEC,
        )
    except asyncio.TimeoutError as e:
        raise ModelUnavailableError(
            "AI review timed out.",
            cause=e,
            retryable=True,
        ) from e


def _confidence_distribution(findings: list[Finding]) -> ConfidenceDistribution:
    return ConfidenceDistribution(
        high=sum(1 for f in findings if f.confidence == "High"),
        medium=sum(1 for f in findings if f.confidence == "Medium"),
        low=sum(1 for f in findings if f.confidence == "Low"),
    )


def build_scan_record(
    code: str,
    language: str,
    result: AnalysisResult,
    static_findings: list[Finding],
    context: AccountContext,
) -> ScanRecordCreate:
    counts = result.severity_counts
    has_previous = context.previous_scan is not None
    return ScanRecordCreate(
        code_hash=hash_code(code),
        language=language,
        summary=result.summary,
        score=result.score,
        issues_count=len(result.issues),
        critical_count=counts.critical,
        high_count=counts.high,
        medium_count=counts.medium,
        low_count=counts.low,
        issues=[f.model_dump(mode="json") for f in result.issues],
        static_checks=[f.model_dump(mode="json") for f in static_findings],
        fixed_code=result.fixed_code,
        fingerprints=result.fingerprints,
        previous_scan_id=context.previous_scan.id if has_previous else None,
        new_issues_count=result.diff.new_issues if has_previous else 0,
        fixed_issues_count=result.diff.fixed_issues if has_previous else 0,
        policy_id=context.policy.id if context.policy else None,
        policy_passed=result.policy_evaluation.passed,
    )


async def analyze(
    code: str,
    language: str,
    *,
    settings: "Settings",
    store: "RecordStore | None" = None,
    account_id: str | None = None,
    explanation_level: str = "senior",
    file_path: str | None = None,
    persist: bool = False,
    reviewer: Reviewer = run_ai_review,
    now: datetime | None = None,
) -> AnalysisResult:
    """
    Run the full analysis pipeline for one request.

    Anonymous callers (account_id=None) skip quota, policy, suppressions, history, and
    persistence. For accounts, usage is counted (and the scan saved when persist=True) only
    after every stage succeeded; a store failure at that point is logged and the in-memory
    result is still returned.

    Raises InvalidInputError, QuotaExceededError, ModelRateLimitedError,
    ModelQuotaExhaustedError, ModelUnavailableError, or PersistenceError (context loading).
    """
    validate_input(code, language, settings)
    if account_id and store is None:
        raise ValueError("A record store is required for account-bound analysis.")
    now = now or datetime.now(timezone.utc)

    context = AccountContext()
    if account_id:
        check_quota(store, account_id, now)
        context = load_account_context(store, account_id)

    logger.info(
        "Analyzing code",
        extra={
            "language": language,
            "code_chars": len(code),
            "explanation_level": explanation_level,
            "anonymous": not account_id,
        },
    )

    static_findings = run_static_checks(code)
    known_titles = list(dict.fromkeys(f.title for f in static_findings))
    review = await _review(reviewer, code, language, explanation_level, known_titles, settings)

    fused = fuse_findings(static_findings, review.issues)
    partition = apply_suppressions(fused, context.suppressions, file_path, now)
    active = partition.active
    fingerprints = [f.fingerprint for f in active if f.fingerprint]

    previous_fps = context.previous_scan.fingerprints if context.previous_scan else None
    diff = compute_diff(active, previous_fps)
    new_since_baseline = count_new_since_baseline(fingerprints, context.baseline)
    policy_result = evaluate_policy(active, context.policy, file_path)
    counts = count_severities(active)
    score = compute_score(review.score, counts)

    result = AnalysisResult(
        summary=review.summary,
        issues=active,
        suppressed_issues=partition.suppressed,
        fixed_code=review.fixed_code,
        score=score,
        severity_counts=counts,
        confidence_distribution=_confidence_distribution(active),
        diff=diff,
        new_since_baseline=new_since_baseline,
        policy_evaluation=policy_result,
        fingerprints=fingerprints,
    )

    if account_id:
        record = (
            build_scan_record(code, language, result, static_findings, context)
            if persist
            else None
        )
        try:
            scan_id = store.record_scan(
                account_id, record, settings.DEFAULT_SCANS_LIMIT, now
            )
        except PersistenceError:
            logger.exception(
                "Saving scan failed; returning unsaved result",
                extra={"persist": persist},
            )
        else:
            result = result.model_copy(update={"scan_id": scan_id})

    logger.info(
        "Analysis complete",
        extra={
            "static_count": len(static_findings),
            "ai_count": len(review.issues),
            "active_count": len(active),
            "suppressed_count": len(partition.suppressed),
            "score": score,
            "policy_passed": policy_result.passed,
        },
    )
    return result
