from typing import Iterable, Optional

from .similarity import similarity
from .text import contains_any
from .types import KnowledgeEntry, MatchCandidate


def best_fuzzy_match(message: str, entries: Iterable[KnowledgeEntry]) -> Optional[MatchCandidate]:
    """Highest-scoring entry for ``message``; ties keep the earlier entry."""
    best: Optional[MatchCandidate] = None
    for entry in entries:
        score = similarity(message, entry.question.lower())
        if best is None or score > best.score:
            best = MatchCandidate(entry=entry, score=score)
    return best


def keyword_match(message: str, entries: Iterable[KnowledgeEntry]) -> Optional[KnowledgeEntry]:
    for entry in entries:
        if contains_any(message, entry.keywords):
            return entry
    return None
