"""Unit tests for codeguard.services.policy: thresholds, violation messages, ignore paths, monotonicity."""

import itertools
import unittest

from codeguard.schemas.findings import Finding
from codeguard.schemas.policy import PolicyConfig
from codeguard.services.policy import count_severities, evaluate_policy


def _findings(critical: int = 0, high: int = 0, medium: int = 0, low: int = 0) -> list[Finding]:
    out: list[Finding] = []
    for severity, count in (("critical", critical), ("high", high), ("medium", medium), ("low", low)):
        out.extend(
            Finding(kind="vulnerability", severity=severity, title=f"{severity} {i}", origin="ai")
            for i in range(count)
        )
    return out


class TestCountSeverities(unittest.TestCase):
    def test_counts(self) -> None:
        counts = count_severities(_findings(critical=1, high=2, low=3))
        self.assertEqual((counts.critical, counts.high, counts.medium, counts.low), (1, 2, 0, 3))


class TestEvaluatePolicy(unittest.TestCase):
    def test_single_critical_breaches_zero_threshold(self) -> None:
        policy = PolicyConfig(max_critical=0, max_high=0, max_medium=5)
        result = evaluate_policy(_findings(critical=1), policy)
        self.assertFalse(result.passed)
        self.assertEqual(result.violations, ["Critical issues: 1 (max: 0)"])

    def test_no_policy_passes(self) -> None:
        result = evaluate_policy(_findings(critical=10), None)
        self.assertTrue(result.passed)
        self.assertEqual(result.violations, [])

    def test_violations_are_in_severity_order(self) -> None:
        policy = PolicyConfig(max_critical=0, max_high=0, max_medium=0, max_low=0)
        result = evaluate_policy(_findings(critical=1, high=2, medium=3, low=4), policy)
        self.assertEqual(
            result.violations,
            [
                "Critical issues: 1 (max: 0)",
                "High issues: 2 (max: 0)",
                "Medium issues: 3 (max: 0)",
                "Low issues: 4 (max: 0)",
            ],
        )

    def test_max_low_none_is_unlimited(self) -> None:
        policy = PolicyConfig(max_low=None)
        self.assertTrue(evaluate_policy(_findings(low=500), policy).passed)

    def test_count_equal_to_limit_passes(self) -> None:
        policy = PolicyConfig(max_medium=5)
        self.assertTrue(evaluate_policy(_findings(medium=5), policy).passed)
        self.assertFalse(evaluate_policy(_findings(medium=6), policy).passed)

    def test_ignored_path_is_exempt(self) -> None:
        policy = PolicyConfig(max_critical=0, ignore_paths=["vendor/", "  "])
        self.assertEqual(policy.ignore_paths, ["vendor/"])
        self.assertTrue(evaluate_policy(_findings(critical=3), policy, "lib/vendor/x.js").passed)
        self.assertFalse(evaluate_policy(_findings(critical=3), policy, "src/x.js").passed)
        self.assertFalse(evaluate_policy(_findings(critical=3), policy, None).passed)


class TestMonotonicity(unittest.TestCase):
    """Raising any threshold never turns a pass into a fail."""

    def test_loosening_never_fails_a_passing_result(self) -> None:
        findings = _findings(critical=1, high=2, medium=3, low=1)
        for c, h, m in itertools.product(range(3), range(4), range(5)):
            strict = PolicyConfig(max_critical=c, max_high=h, max_medium=m, max_low=1)
            loose = PolicyConfig(max_critical=c + 1, max_high=h + 1, max_medium=m + 1, max_low=None)
            if evaluate_policy(findings, strict).passed:
                self.assertTrue(evaluate_policy(findings, loose).passed)
            self.assertLessEqual(
                len(evaluate_policy(findings, loose).violations),
                len(evaluate_policy(findings, strict).violations),
            )


if __name__ == "__main__":
    unittest.main()
