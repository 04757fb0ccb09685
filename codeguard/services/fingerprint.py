"""Vulnerability fingerprints: stable finding identity for cross-scan diffing, baselines, and audit.

The fingerprint is derived only from (kind, title, line). Identical triples collapse to the
same fingerprint across scans of different code; inserting lines above a finding therefore
shows up as a new + fixed pair rather than as unchanged.
"""

import hashlib

from codeguard.schemas.findings import Finding

# Hex characters kept from the SHA-256 digest (64 bits).
FINGERPRINT_LENGTH = 16


def fingerprint(kind: str, title: str | None, line: int | None) -> str:
    """Deterministic fingerprint for a (kind, title, line) triple; a missing line counts as 0."""
    hash_input = f"{kind}|{title or ''}|{line or 0}"
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def fingerprint_finding(finding: Finding) -> str:
    return fingerprint(finding.kind, finding.title, finding.line)
