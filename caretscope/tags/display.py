"""Status-line label for a resolved symbol."""

from __future__ import annotations

from .types import SymbolRecord


def symbol_label(record: SymbolRecord) -> str:
    """Return ``Owner.name()`` for owned symbols, plain ``name`` otherwise."""
    if record.owner:
        return f"{record.owner}.{record.name}()"
    return record.name


def format_label(record: SymbolRecord | None) -> str:
    """Render ``[in <label> (<kind>)]``, or an empty string when nothing encloses the caret."""
    if record is None:
        return ""
    return f"[in {symbol_label(record)} ({record.kind})]"
