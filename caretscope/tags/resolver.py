"""Caret-to-symbol resolution with an indentation-continuity check."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence

from .config import DEFAULT_COMMENT_MARKER, TAB_COLUMNS
from .types import SymbolRecord, SymbolTable


def leading_indent_columns(text: str) -> int:
    """Return leading indentation width where tabs count as eight columns."""
    count = 0
    for ch in text:
        if ch == "\t":
            count += TAB_COLUMNS
            continue
        if ch.isspace():
            count += 1
            continue
        break
    return count


def nearest_start_line(start_lines: Sequence[int], caret_line: int) -> int | None:
    """Return the greatest start line ``<= caret_line`` from an ascending sequence."""
    index = bisect_right(start_lines, caret_line)
    if index == 0:
        return None
    return start_lines[index - 1]


def _ignored_for_continuity(text: str, comment_marker: str) -> bool:
    """Blank lines and comment lines never end a symbol body."""
    stripped = text.lstrip()
    if not stripped:
        return True
    return bool(comment_marker) and stripped.startswith(comment_marker)


def body_continues(
    record: SymbolRecord,
    caret_line: int,
    live_lines: Sequence[str],
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> bool:
    """Return whether no line between header and caret dedents below the header.

    Lines are checked strictly between ``record.start_line`` and
    ``caret_line``; line numbers past the end of ``live_lines`` are ignored.
    """
    last_line = min(caret_line - 1, len(live_lines))
    for line_number in range(record.start_line + 1, last_line + 1):
        text = live_lines[line_number - 1]
        if _ignored_for_continuity(text, comment_marker):
            continue
        if leading_indent_columns(text) < record.indent_column:
            return False
    return True


def resolve(
    table: SymbolTable,
    caret_line: int,
    live_lines: Sequence[str],
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> SymbolRecord | None:
    """Return the symbol enclosing ``caret_line`` (1-based), or ``None``.

    Only the nearest preceding tag is considered. When an intervening line
    dedents out of it the result is ``None``; shallower tags further up are
    not searched.
    """
    candidate_line = nearest_start_line(table.start_lines, caret_line)
    if candidate_line is None:
        return None

    record = table.record_at(candidate_line)
    if record is None:
        return None

    if not body_continues(record, caret_line, live_lines, comment_marker):
        return None
    return record
