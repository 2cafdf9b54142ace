from typing import Optional, Tuple

from .types import MatchCandidate

FUZZY_THRESHOLD = 0.5


def passes_similarity_gate(
    candidate: Optional[MatchCandidate],
    threshold: float = FUZZY_THRESHOLD,
) -> Tuple[bool, float]:
    if candidate is None:
        return False, 0.0
    return candidate.score > threshold, candidate.score
