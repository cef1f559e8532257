"""Edit-distance based fuzzy matching for typos and declensions."""

from __future__ import annotations

DEFAULT_THRESHOLD = 0.25


def distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]


def is_similar(a: str, b: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """True when the relative edit distance is below ``threshold``.

    Two empty strings never match, otherwise every blank field would.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return False
    # distance is never below the length difference
    if abs(len(a) - len(b)) / longest >= threshold:
        return False
    return distance(a, b) / longest < threshold
