"""Parsing of ctags ``--format=2`` output into symbol records.

Every tool-format assumption lives here so a format change touches one file.
Expected line shape::

    <name>\t<file>\t/^<pattern>$/;"\t<kind>\tline:<n>[\t<ownerKind>:<owner>]
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .config import PATTERN_INDENT_BASE
from .resolver import leading_indent_columns
from .types import SymbolRecord, SymbolTable

_TAG_LINE_RE = re.compile(
    r'^(?P<name>[^\t]+)\t[^\t]*\t(?P<pattern>/\^.*)/;"\t(?P<kind>[^\t]+)'
    r"\tline:(?P<line>\d+)(?P<extra>(?:\t[^\t]*)*)$"
)
_WARNING_PREVIEW_CHARS = 120


def pattern_indent_column(pattern: str) -> int:
    """Return header indentation recovered from a ``/^...`` search pattern."""
    return PATTERN_INDENT_BASE + leading_indent_columns(pattern[2:])


def _owner_from_extra(extra: str) -> str | None:
    """Pick the owner name out of an optional ``<kind>:<name>`` scope field."""
    for field in extra.split("\t"):
        if not field:
            continue
        _owner_kind, sep, owner = field.partition(":")
        if sep and owner:
            return owner
        return None
    return None


def _preview(raw: str) -> str:
    if len(raw) <= _WARNING_PREVIEW_CHARS:
        return raw
    return raw[: _WARNING_PREVIEW_CHARS - 3] + "..."


def parse_tag_line(raw: str) -> tuple[SymbolRecord | None, str | None]:
    """Parse one output line.

    Returns ``(record, None)`` on success, ``(None, warning)`` for a line that
    does not match the expected layout, and ``(None, None)`` for blank lines
    and ``!``-prefixed tool metadata.
    """
    line = raw.rstrip("\r\n")
    if not line or line.startswith("!"):
        return None, None

    match = _TAG_LINE_RE.match(line)
    if match is None:
        return None, f"unrecognized tag line: {_preview(line)}"

    line_number = int(match.group("line"))
    if line_number <= 0:
        return None, f"invalid line number in tag line: {_preview(line)}"

    record = SymbolRecord(
        name=match.group("name"),
        kind=match.group("kind"),
        start_line=line_number,
        indent_column=pattern_indent_column(match.group("pattern")),
        owner=_owner_from_extra(match.group("extra")),
    )
    return record, None


def parse_tag_output(lines: Iterable[str]) -> SymbolTable:
    """Parse a whole tool output stream, skipping malformed lines."""
    records: list[SymbolRecord] = []
    warnings: list[str] = []
    for raw in lines:
        record, warning = parse_tag_line(raw)
        if warning is not None:
            warnings.append(warning)
            continue
        if record is not None:
            records.append(record)
    return SymbolTable.from_records(records, warnings)
