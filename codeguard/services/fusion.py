"""Fusion & confidence: merge static and AI findings, assign confidence tiers and fingerprints.

No structural deduplication happens here. Both detectors may describe the same real issue
under different titles; cross-detector agreement is expressed through confidence instead.
"""

from codeguard.schemas.findings import (
    DETECTION_AI,
    DETECTION_STATIC,
    ConfidenceLevel,
    Finding,
)
from codeguard.services.fingerprint import fingerprint_finding

REASON_BOTH = "Detected by both static analysis and AI."
REASON_STATIC_ONLY = "Detected by static pattern matching only."
REASON_AI_ONLY = "Detected by AI reasoning only."


def _first_word(title: str) -> str:
    return (title or "").lower().split(" ")[0]


def _has_similar(key: str, titles: list[str]) -> bool:
    return any(key in t for t in titles)


def calculate_confidence(
    finding: Finding,
    static_titles: list[str],
    ai_titles: list[str],
) -> tuple[ConfidenceLevel, str, list[str]]:
    """
    Return (confidence, reason, detection_methods) for one finding.

    High when the first word of the title occurs in some static title and in some AI title;
    otherwise Medium for static-origin and Low for AI-origin findings. Titles are lowercased.
    An empty title is never cross-confirmed.
    """
    key = _first_word(finding.title)
    if key and _has_similar(key, static_titles) and _has_similar(key, ai_titles):
        return "High", REASON_BOTH, [DETECTION_STATIC, DETECTION_AI]
    if finding.origin == "static":
        return "Medium", REASON_STATIC_ONLY, [DETECTION_STATIC]
    return "Low", REASON_AI_ONLY, [DETECTION_AI]


def fuse_findings(static_findings: list[Finding], ai_findings: list[Finding]) -> list[Finding]:
    """Concatenate static then AI findings, each enriched with confidence and fingerprint."""
    static_titles = [(f.title or "").lower() for f in static_findings]
    ai_titles = [(f.title or "").lower() for f in ai_findings]

    fused: list[Finding] = []
    for finding in [*static_findings, *ai_findings]:
        confidence, reason, methods = calculate_confidence(finding, static_titles, ai_titles)
        fused.append(
            finding.model_copy(
                update={
                    "confidence": confidence,
                    "confidence_reason": reason,
                    "detection_methods": methods,
                    "fingerprint": fingerprint_finding(finding),
                }
            )
        )
    return fused
