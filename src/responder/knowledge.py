import logging
from typing import Any, Iterable, Iterator, Mapping, Tuple, Union

from .errors import ConfigError
from .types import KnowledgeEntry

logger = logging.getLogger(__name__)

EntryLike = Union[KnowledgeEntry, Mapping[str, Any]]


class KnowledgeBase:
    """Ordered, read-only collection of curated question/answer records.

    Built once through :meth:`load` and never mutated afterwards, so a single
    instance can be shared by concurrent requests without locking.
    """

    def __init__(self, entries: Tuple[KnowledgeEntry, ...] = ()) -> None:
        self._entries = tuple(entries)

    @classmethod
    def load(cls, entries: Iterable[EntryLike]) -> "KnowledgeBase":
        loaded = tuple(_to_entry(idx, raw) for idx, raw in enumerate(entries))
        logger.info("Loaded %d knowledge base entries", len(loaded))
        return cls(loaded)

    def all(self) -> Tuple[KnowledgeEntry, ...]:
        return self._entries

    def __iter__(self) -> Iterator[KnowledgeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _to_entry(idx: int, raw: EntryLike) -> KnowledgeEntry:
    if isinstance(raw, KnowledgeEntry):
        question, answer, keywords = raw.question, raw.answer, raw.keywords
    elif isinstance(raw, Mapping):
        question = raw.get("question")
        answer = raw.get("answer")
        keywords = raw.get("keywords")
        if keywords is None:
            keywords = []
    else:
        raise ConfigError(f"Knowledge entry #{idx} must be a mapping, got {type(raw).__name__}")

    if not isinstance(question, str):
        raise ConfigError(f"Knowledge entry #{idx} has no question")
    if not isinstance(answer, str) or not answer.strip():
        raise ConfigError(f"Knowledge entry #{idx} ({question!r}) has an empty answer")
    if not isinstance(keywords, (list, tuple)) or not all(isinstance(kw, str) for kw in keywords):
        raise ConfigError(f"Knowledge entry #{idx} ({question!r}) keywords must be a list of strings")

    return KnowledgeEntry(
        question=question,
        answer=answer,
        keywords=tuple(kw.lower() for kw in keywords if kw),
    )
