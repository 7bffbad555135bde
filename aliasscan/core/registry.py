"""Visitation registry: first sight vs. repeat sight of each identity."""

from __future__ import annotations

from typing import Dict, Iterator, List

from .identity import IdentityKey


class VisitationRegistry:
    """
    Maps every identity seen during a scan to its is-duplicate flag.

    The registry doubles as the walker's "seen" set: a key that is present
    has been visited at least once, and its flag turns ``True`` on the
    second visit. Entries are never removed and flags never go back to
    ``False``.
    """

    def __init__(self):
        self._flags: Dict[IdentityKey, bool] = {}

    def register_and_check(self, key: IdentityKey) -> bool:
        """
        Record a visit to ``key``.

        Args:
            key: Identity being visited

        Returns:
            True if ``key`` had been visited before this call
        """
        if key in self._flags:
            self._flags[key] = True
            return True

        self._flags[key] = False
        return False

    def is_duplicate(self, key: IdentityKey) -> bool:
        return self._flags.get(key, False)

    def duplicates(self) -> List[IdentityKey]:
        """All keys visited more than once, in first-visit order."""
        return [key for key, flag in self._flags.items() if flag]

    def snapshot(self) -> Dict[IdentityKey, bool]:
        """Copy of the current key -> flag mapping."""
        return dict(self._flags)

    def clear(self) -> None:
        self._flags.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._flags

    def __len__(self) -> int:
        return len(self._flags)

    def __iter__(self) -> Iterator[IdentityKey]:
        return iter(self._flags)
