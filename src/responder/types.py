from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Provenance(str, Enum):
    AI = "ai"
    KB_FUZZY = "kb-fuzzy"
    KB_KEYWORD = "kb-keyword"
    HEURISTIC = "heuristic"
    DEFAULT = "default"


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    content: str


@dataclass(frozen=True)
class KnowledgeEntry:
    question: str
    answer: str
    keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchCandidate:
    entry: KnowledgeEntry
    score: float


@dataclass
class Reply:
    text: str
    provenance: Provenance
    score: Optional[float] = None
    intent: Optional[str] = None
