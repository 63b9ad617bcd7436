"""Shared tag datatypes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


class ExtractionFailure(Exception):
    """Raised when the tag tool cannot produce a usable output stream."""


@dataclass(frozen=True)
class SymbolRecord:
    """One tag emitted by the extraction tool."""

    name: str
    kind: str
    start_line: int  # 1-based
    indent_column: int
    owner: str | None = None


@dataclass(frozen=True)
class SymbolTable:
    """Immutable per-buffer symbol table.

    ``records`` maps start line to record and ``start_lines`` holds the same
    keys in ascending order. Tables are built once and replaced wholesale.
    """

    records: Mapping[int, SymbolRecord] = field(default_factory=lambda: MappingProxyType({}))
    start_lines: tuple[int, ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def from_records(
        cls,
        records: Iterable[SymbolRecord],
        warnings: Iterable[str] = (),
    ) -> SymbolTable:
        """Build a table; a later record with the same start line wins."""
        by_line: dict[int, SymbolRecord] = {}
        for record in records:
            by_line[record.start_line] = record
        return cls(
            records=MappingProxyType(by_line),
            start_lines=tuple(sorted(by_line)),
            warnings=tuple(warnings),
        )

    def __len__(self) -> int:
        return len(self.start_lines)

    def record_at(self, start_line: int) -> SymbolRecord | None:
        return self.records.get(start_line)

