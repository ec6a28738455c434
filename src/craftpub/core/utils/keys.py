"""Array item keys for Portable Text blocks and reference arrays"""

from itertools import count


class KeyFactory:
    """Hands out `<prefix>-<n>` keys from one counter, so keys never repeat within a run."""

    def __init__(self, start: int = 1):
        self._counter = count(start)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"
