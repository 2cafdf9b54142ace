import re
from collections import Counter
from typing import Iterable

SPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    return text.lower()


def bigrams(text: str) -> Counter:
    compact = SPACE_RE.sub("", text)
    return Counter(compact[i : i + 2] for i in range(len(compact) - 1))


def contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle and needle in text for needle in needles)
