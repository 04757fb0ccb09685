"""Static scanner: run the rule catalog over source text line by line."""

import logging
import re

from codeguard.schemas.findings import Finding
from codeguard.services.rules import RULES, SECRET_RULE_KEY, StaticRule, category_for
from codeguard.services.secrets import classify_secret

logger = logging.getLogger(__name__)

# CRLF, lone CR, and LF all end a line.
_NEWLINE = re.compile(r"\r\n|\r|\n")


def split_lines(code: str) -> list[str]:
    """Split source into lines; all common newline conventions behave identically."""
    if not code:
        return []
    return _NEWLINE.split(code)


def _finding_for(rule: StaticRule, code: str, line_text: str, line_no: int) -> Finding:
    category_id, category_name = category_for(rule.category_key)
    finding = Finding(
        kind=rule.kind,
        severity=rule.severity,
        title=rule.title,
        description=rule.description,
        remediation=rule.remediation,
        line=line_no,
        category_id=category_id,
        category_name=category_name,
        weakness_id=rule.weakness_id,
        origin="static",
    )
    if rule.key == SECRET_RULE_KEY:
        context = classify_secret(code, line_text)
        finding = finding.model_copy(
            update={"secret_context": context, "severity": context.risk_level}
        )
    return finding


def run_static_checks(code: str, rules: tuple[StaticRule, ...] = RULES) -> list[Finding]:
    """
    Evaluate every rule against every line and return one finding per hit.

    A line may trigger several rules and a rule may fire on several lines; nothing is
    deduplicated here. Output is ordered by rule, then by line. Pure and deterministic.
    """
    lines = split_lines(code)
    findings: list[Finding] = []
    for rule in rules:
        for index, line_text in enumerate(lines):
            if rule.pattern.search(line_text):
                findings.append(_finding_for(rule, code, line_text, index + 1))
    logger.debug(
        "Static scan completed",
        extra={"line_count": len(lines), "static_count": len(findings)},
    )
    return findings
