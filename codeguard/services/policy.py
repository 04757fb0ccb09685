"""Policy evaluator: pass/fail of active findings against severity-count thresholds."""

from codeguard.schemas.analysis import PolicyEvaluation, SeverityCounts
from codeguard.schemas.findings import SEVERITY_ORDER, Finding
from codeguard.schemas.policy import PolicyConfig


def count_severities(findings: list[Finding]) -> SeverityCounts:
    counts = {severity: 0 for severity in SEVERITY_ORDER}
    for finding in findings:
        counts[finding.severity] += 1
    return SeverityCounts(**counts)


def is_path_ignored(policy: PolicyConfig, file_path: str | None) -> bool:
    """True when the scanned path contains any ignore_paths entry."""
    if not file_path:
        return False
    return any(p and p in file_path for p in policy.ignore_paths)


def evaluate_policy(
    findings: list[Finding],
    policy: PolicyConfig | None,
    file_path: str | None = None,
) -> PolicyEvaluation:
    """
    Evaluate active findings against the account policy.

    No policy, or an exempted path, passes. Otherwise one violation message is produced per
    breached tier, always in the order critical, high, medium, low. max_low=None is unlimited.
    """
    if policy is None or is_path_ignored(policy, file_path):
        return PolicyEvaluation(passed=True, violations=[])

    counts = count_severities(findings)
    thresholds = (
        ("Critical", counts.critical, policy.max_critical),
        ("High", counts.high, policy.max_high),
        ("Medium", counts.medium, policy.max_medium),
        ("Low", counts.low, policy.max_low),
    )
    violations = [
        f"{label} issues: {count} (max: {limit})"
        for label, count, limit in thresholds
        if limit is not None and count > limit
    ]
    return PolicyEvaluation(passed=not violations, violations=violations)
