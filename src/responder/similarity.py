from .text import SPACE_RE, bigrams


def similarity(a: str, b: str) -> float:
    """Dice coefficient over the bigram multisets of ``a`` and ``b``.

    Whitespace is ignored throughout: strings that are equal once it is
    removed score 1.0 (two empty or blank strings included), and anything
    else shorter than two characters scores 0.0. Inputs are compared as
    given, so callers lowercase them first.
    """
    compact_a = SPACE_RE.sub("", a)
    compact_b = SPACE_RE.sub("", b)
    if compact_a == compact_b:
        return 1.0
    if len(compact_a) < 2 or len(compact_b) < 2:
        return 0.0

    first = bigrams(compact_a)
    second = bigrams(compact_b)
    overlap = sum((first & second).values())
    total = sum(first.values()) + sum(second.values())
    return 2.0 * overlap / total
