"""Diff engine: compare current fingerprints with the previous scan and with the active baseline."""

from codeguard.schemas.analysis import DiffSummary
from codeguard.schemas.findings import Finding
from codeguard.services.fingerprint import fingerprint_finding


def _unique(values: list[str]) -> list[str]:
    """Order-preserving de-duplication."""
    return list(dict.fromkeys(values))


def _fingerprint_of(finding: Finding) -> str:
    return finding.fingerprint or fingerprint_finding(finding)


def compute_diff(
    current: list[Finding],
    previous_fingerprints: list[str] | None,
) -> DiffSummary:
    """
    new = C \\ P, fixed = P \\ C, unchanged = C ∩ P (set semantics on fingerprints).

    new_issue_details holds the first current finding per new fingerprint; fixed issues are
    bare fingerprints. Without a previous scan the diff is empty by definition.
    """
    if previous_fingerprints is None:
        return DiffSummary()

    previous = set(previous_fingerprints)
    first_by_fp: dict[str, Finding] = {}
    for finding in current:
        first_by_fp.setdefault(_fingerprint_of(finding), finding)
    current_set = set(first_by_fp)

    new_details = [f for fp, f in first_by_fp.items() if fp not in previous]
    unchanged = [fp for fp in first_by_fp if fp in previous]
    fixed = [fp for fp in _unique(previous_fingerprints) if fp not in current_set]

    return DiffSummary(
        new_issues=len(new_details),
        fixed_issues=len(fixed),
        unchanged_issues=len(unchanged),
        new_issue_details=new_details,
        fixed_issue_fingerprints=fixed,
    )


def count_new_since_baseline(
    current_fingerprints: list[str],
    baseline_fingerprints: list[str] | None,
) -> int:
    """Distinct current fingerprints absent from the baseline; every one counts when there is none."""
    current = _unique(current_fingerprints)
    if not baseline_fingerprints:
        return len(current)
    baseline = set(baseline_fingerprints)
    return sum(1 for fp in current if fp not in baseline)
