"""Unit tests for codeguard.services.diff and codeguard.services.scoring."""

import unittest

from codeguard.schemas.analysis import SeverityCounts
from codeguard.schemas.findings import Finding
from codeguard.services.diff import compute_diff, count_new_since_baseline
from codeguard.services.fingerprint import fingerprint_finding
from codeguard.services.scoring import compute_score


def _finding(title: str, line: int) -> Finding:
    finding = Finding(kind="vulnerability", severity="high", title=title, line=line, origin="static")
    return finding.model_copy(update={"fingerprint": fingerprint_finding(finding)})


A = _finding("Potential SQL Injection", 3)
B = _finding("Dangerous eval() Usage", 7)
C = _finding("Potential XSS Vulnerability", 11)


class TestComputeDiff(unittest.TestCase):
    def test_no_previous_scan_is_empty_diff(self) -> None:
        diff = compute_diff([A, B], None)
        self.assertEqual((diff.new_issues, diff.fixed_issues, diff.unchanged_issues), (0, 0, 0))
        self.assertEqual(diff.new_issue_details, [])
        self.assertEqual(diff.fixed_issue_fingerprints, [])

    def test_set_difference(self) -> None:
        diff = compute_diff([A, B], [B.fingerprint, C.fingerprint])
        self.assertEqual(diff.new_issues, 1)
        self.assertEqual(diff.new_issue_details, [A])
        self.assertEqual(diff.fixed_issues, 1)
        self.assertEqual(diff.fixed_issue_fingerprints, [C.fingerprint])
        self.assertEqual(diff.unchanged_issues, 1)

    def test_empty_previous_scan_makes_everything_new(self) -> None:
        diff = compute_diff([A, B], [])
        self.assertEqual(diff.new_issues, 2)
        self.assertEqual(diff.fixed_issues, 0)

    def test_duplicates_collapse(self) -> None:
        diff = compute_diff([A, A, B], [C.fingerprint, C.fingerprint])
        self.assertEqual(diff.new_issues, 2)
        self.assertEqual(diff.new_issue_details, [A, B])
        self.assertEqual(diff.fixed_issue_fingerprints, [C.fingerprint])

    def test_partitions_are_disjoint(self) -> None:
        current = [A, B]
        previous = [B.fingerprint, C.fingerprint]
        diff = compute_diff(current, previous)
        new = {f.fingerprint for f in diff.new_issue_details}
        fixed = set(diff.fixed_issue_fingerprints)
        unchanged = {f.fingerprint for f in current} & set(previous)
        self.assertFalse(new & fixed)
        self.assertFalse(new & unchanged)
        self.assertFalse(fixed & unchanged)
        self.assertEqual(len(unchanged), diff.unchanged_issues)

    def test_line_shift_reads_as_new_plus_fixed(self) -> None:
        moved = _finding("Potential SQL Injection", 4)
        diff = compute_diff([moved], [A.fingerprint])
        self.assertEqual((diff.new_issues, diff.fixed_issues, diff.unchanged_issues), (1, 1, 0))


class TestNewSinceBaseline(unittest.TestCase):
    def test_without_baseline_every_distinct_fingerprint_counts(self) -> None:
        self.assertEqual(count_new_since_baseline(["a", "b", "a"], None), 2)
        self.assertEqual(count_new_since_baseline(["a", "b"], []), 2)

    def test_with_baseline(self) -> None:
        self.assertEqual(count_new_since_baseline(["a", "b", "c"], ["b", "x"]), 2)


class TestComputeScore(unittest.TestCase):
    def test_default_base_when_ai_score_missing(self) -> None:
        self.assertEqual(compute_score(None, SeverityCounts()), 50)

    def test_zero_ai_score_is_kept(self) -> None:
        self.assertEqual(compute_score(0, SeverityCounts()), 0)

    def test_penalties(self) -> None:
        counts = SeverityCounts(critical=1, high=1, medium=1, low=10)
        self.assertEqual(compute_score(90, counts), 90 - 20 - 10 - 5)

    def test_clamped_to_range(self) -> None:
        self.assertEqual(compute_score(40, SeverityCounts(critical=5)), 0)
        self.assertEqual(compute_score(250, SeverityCounts()), 100)
        self.assertEqual(compute_score(-30, SeverityCounts()), 0)
        for critical in range(10):
            score = compute_score(100, SeverityCounts(critical=critical))
            self.assertTrue(0 <= score <= 100)


if __name__ == "__main__":
    unittest.main()
