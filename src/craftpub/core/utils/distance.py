"""Case-insensitive Levenshtein distance and typo-tolerant name matching"""

from typing import Any, Optional


def levenshtein(a: Optional[str], b: Optional[str]) -> int:
    """Return the edit distance between a and b, ignoring case."""
    s = (a or '').lower()
    t = (b or '').lower()
    if not s:
        return len(t)
    if not t:
        return len(s)

    prev = list(range(len(t) + 1))
    for i, cs in enumerate(s, 1):
        row = [i]
        for j, ct in enumerate(t, 1):
            row.append(min(
                prev[j] + 1,
                row[j - 1] + 1,
                prev[j - 1] + (cs != ct),
            ))
        prev = row
    return prev[-1]


def find_similar(
    name: str,
    candidates: list[dict[str, Any]],
    field: str,
    threshold: int = 2,
    ) -> Optional[tuple[dict[str, Any], int]]:
    """Return (candidate, distance) for the closest candidate within threshold, else None.

    Candidates whose `field` is missing or not a string are skipped. Only a
    strictly smaller distance replaces the current best, so ties go to the
    first candidate seen.
    """
    best = None
    best_distance = threshold + 1
    for item in candidates:
        label = item.get(field)
        if not label or not isinstance(label, str):
            continue
        distance = levenshtein(name, label)
        if distance < best_distance:
            best, best_distance = item, distance
    return (best, best_distance) if best is not None else None
