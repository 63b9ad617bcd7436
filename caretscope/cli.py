"""Command-line front door for caretscope.

Resolves the symbol enclosing a file position, or dumps the file's tag table.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from .runtime import BufferSnapshot, CurrentSymbolTracker, load_settings
from .tags import ExtractionFailure, SymbolTable, symbol_label
from .tags.config import comment_marker_for


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def _position(value: str) -> tuple[int, int]:
    """argparse type for ``LINE`` or ``LINE:COL`` with a 1-based line."""
    line_text, _sep, column_text = value.partition(":")
    try:
        line = int(line_text)
        column = int(column_text) if column_text else 0
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid position: {value!r}") from exc
    if line <= 0 or column < 0:
        raise argparse.ArgumentTypeError("line must be >= 1 and column >= 0")
    return line, column


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def format_table(table: SymbolTable) -> str:
    """Render one fixed-width row per tag in line order."""
    rows = []
    for start_line in table.start_lines:
        record = table.records[start_line]
        rows.append(f"L{start_line:>5}  {record.kind:10} indent={record.indent_column:<3} {symbol_label(record)}\n")
    return "".join(rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="caretscope",
        description="Report the class/function enclosing a position in a source file.",
    )
    parser.add_argument("path", help="Source file to tag.")
    parser.add_argument("position", nargs="?", type=_position, help="LINE or LINE:COL (1-based line).")
    parser.add_argument("--tags", action="store_true", help="Print the file's tag table and exit.")
    parser.add_argument("--ctags", default=None, help="ctags executable (default from config).")
    parser.add_argument("--language", default=None, help="Language passed to ctags (default from config).")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Seconds to wait for ctags.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print a label or tag table."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.position is None and not args.tags:
        parser.error("a position is required unless --tags is given")

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")

    settings = load_settings()
    overrides: dict[str, object] = {}
    if args.ctags:
        overrides["ctags_command"] = args.ctags
    if args.language:
        overrides["language"] = args.language
        overrides["comment_marker"] = comment_marker_for(args.language)
    if args.timeout is not None:
        overrides["extract_timeout_seconds"] = args.timeout
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    lines = read_text(path).splitlines()
    tracker = CurrentSymbolTracker(settings)

    if args.tags:
        try:
            table = tracker.extractor.extract(lines, buffer_id=path.name)
        except ExtractionFailure as exc:
            raise SystemExit(f"Tag extraction failed: {exc}") from exc
        sys.stdout.write(format_table(table))
        return

    snapshot = BufferSnapshot(
        buffer_id=str(path.resolve()),
        revision=0,
        lines=lines,
        caret=args.position,
        filetype=settings.language,
        path=path,
    )
    outcome = tracker.resolve(snapshot)
    if not outcome.ok:
        raise SystemExit(f"Tag extraction failed: {outcome.error_message}")
    sys.stdout.write(outcome.label + "\n")
