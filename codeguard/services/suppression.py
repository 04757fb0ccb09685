"""Suppression filter: split findings into active and suppressed using account rules."""

from datetime import datetime, timezone
from typing import NamedTuple

from codeguard.schemas.findings import Finding
from codeguard.schemas.policy import WILDCARD_ISSUE_TYPE, SuppressionRuleConfig


class SuppressionResult(NamedTuple):
    """Both partitions; suppressed findings are kept for audit visibility."""

    active: list[Finding]
    suppressed: list[Finding]


def _as_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so comparisons never raise."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def is_rule_in_effect(rule: SuppressionRuleConfig, now: datetime) -> bool:
    """Inactive rules and rules whose expiry is in the past never suppress."""
    if not rule.is_active:
        return False
    if rule.expires_at is not None and _as_aware(rule.expires_at) < _as_aware(now):
        return False
    return True


def _path_condition_holds(rule: SuppressionRuleConfig, file_path: str | None) -> bool:
    """
    global and repo scopes carry no per-file condition. A file-scoped rule with a path
    filter needs a scanned file path containing it; without a filter it applies to every file.
    """
    if rule.scope != "file" or not rule.file_path:
        return True
    return bool(file_path) and rule.file_path in file_path


def rule_matches(rule: SuppressionRuleConfig, finding: Finding, file_path: str | None) -> bool:
    """Kind (or wildcard), optional case-insensitive title substring, and scope path condition."""
    if rule.issue_type != WILDCARD_ISSUE_TYPE and rule.issue_type != finding.kind:
        return False
    if rule.issue_title and rule.issue_title.lower() not in (finding.title or "").lower():
        return False
    return _path_condition_holds(rule, file_path)


def is_suppressed(
    finding: Finding,
    rules: list[SuppressionRuleConfig],
    file_path: str | None,
    now: datetime,
) -> bool:
    return any(
        is_rule_in_effect(rule, now) and rule_matches(rule, finding, file_path)
        for rule in rules
    )


def apply_suppressions(
    findings: list[Finding],
    rules: list[SuppressionRuleConfig],
    file_path: str | None = None,
    now: datetime | None = None,
) -> SuppressionResult:
    """Partition findings, preserving order within each partition."""
    now = now or datetime.now(timezone.utc)
    active: list[Finding] = []
    suppressed: list[Finding] = []
    for finding in findings:
        if is_suppressed(finding, rules, file_path, now):
            suppressed.append(finding)
        else:
            active.append(finding)
    return SuppressionResult(active=active, suppressed=suppressed)
