"""Redirect loop detection."""

from collections.abc import Hashable


class RedirectTracker:
    """Counts visits per location within one logical fetch.

    A location may be visited ``max_redirects + 1`` times; the next visit
    is reported as a loop and is not counted.
    """

    def __init__(self, max_redirects: int = 0):
        self.max_redirects = max_redirects
        self._visits: dict[Hashable, int] = {}

    def visit(self, key: Hashable) -> bool:
        """Record a visit to ``key``. Returns True when it would loop."""
        if self._visits.get(key, 0) > self.max_redirects:
            return True
        self._visits[key] = self._visits.get(key, 0) + 1
        return False

    def visits(self, key: Hashable) -> int:
        return self._visits.get(key, 0)
