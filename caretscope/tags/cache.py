"""Per-buffer symbol-table cache keyed by buffer revision."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass

from .types import SymbolTable


@dataclass(frozen=True)
class CacheEntry:
    """Symbol table built for one buffer revision."""

    revision: int
    table: SymbolTable


class TagCache:
    """Owns every cached table; entries are replaced wholesale, never mutated.

    Not synchronized: callers deliver triggers one at a time.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, CacheEntry] = {}

    def get_or_refresh(
        self,
        buffer_id: Hashable,
        revision: int,
        refresh_fn: Callable[[], SymbolTable],
    ) -> SymbolTable:
        """Return the table for ``revision``, rebuilding it on a miss.

        ``ExtractionFailure`` from ``refresh_fn`` propagates and leaves any
        existing entry untouched.
        """
        entry = self._entries.get(buffer_id)
        if entry is not None and entry.revision == revision:
            return entry.table

        table = refresh_fn()
        self._entries[buffer_id] = CacheEntry(revision=revision, table=table)
        return table

    def evict(self, buffer_id: Hashable) -> None:
        """Drop the entry for ``buffer_id``; absent ids are ignored."""
        self._entries.pop(buffer_id, None)

    def peek(self, buffer_id: Hashable) -> CacheEntry | None:
        return self._entries.get(buffer_id)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, buffer_id: object) -> bool:
        return buffer_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
