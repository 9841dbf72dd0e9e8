# SPDX-License-Identifier: MIT
"""In-memory module table with a dirty flag."""

from __future__ import annotations

from typing import Iterator, Mapping

from ..models import CacheEntry


class CacheTable:
    """Mapping of slash-form module names to :class:`CacheEntry` values.

    ``dirty`` is true exactly when the table holds changes that the store has
    not yet persisted. Loading from disk replaces the contents without marking
    the table dirty; every other mutation does.
    """

    def __init__(self, entries: Mapping[str, CacheEntry] | None = None) -> None:
        self._entries: dict[str, CacheEntry] = dict(entries or {})
        self.dirty = False

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry for ``key`` if present."""
        return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        """Insert or replace the entry for ``key``."""
        self._entries[key] = entry
        self.dirty = True

    def remove(self, key: str) -> None:
        """Drop the entry for ``key``; missing keys are ignored."""
        if self._entries.pop(key, None) is not None:
            self.dirty = True

    def replace_all(self, entries: Mapping[str, CacheEntry]) -> None:
        """Swap in ``entries`` as the persisted baseline."""
        self._entries = dict(entries)
        self.dirty = False

    def clear(self) -> None:
        """Remove every entry and forget pending changes."""
        self._entries.clear()
        self.dirty = False

    def mark_clean(self) -> None:
        """Record that the current contents have been persisted."""
        self.dirty = False

    def snapshot(self) -> dict[str, CacheEntry]:
        """Return a shallow copy of the entries."""
        return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CacheTable"]
