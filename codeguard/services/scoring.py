"""Security score: AI-reported score minus severity penalties, clamped to [0, 100]."""

from codeguard.schemas.analysis import SeverityCounts

DEFAULT_BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

# Penalty per active finding; low severity does not affect the score.
CRITICAL_PENALTY = 20
HIGH_PENALTY = 10
MEDIUM_PENALTY = 5


def compute_score(ai_score: int | None, counts: SeverityCounts) -> int:
    base = DEFAULT_BASE_SCORE if ai_score is None else ai_score
    score = (
        base
        - counts.critical * CRITICAL_PENALTY
        - counts.high * HIGH_PENALTY
        - counts.medium * MEDIUM_PENALTY
    )
    return max(MIN_SCORE, min(MAX_SCORE, score))
