"""Public API surface for tag extraction, caching and resolution.

The ``__init__`` module is a facade so callers can import from
``caretscope.tags`` without depending on internal layout.
"""

from __future__ import annotations

from .cache import CacheEntry, TagCache
from .display import format_label, symbol_label
from .extractor import TagExtractor
from .parse import parse_tag_line, parse_tag_output, pattern_indent_column
from .resolver import leading_indent_columns, nearest_start_line, resolve
from .types import ExtractionFailure, SymbolRecord, SymbolTable

__all__ = [
    "CacheEntry",
    "ExtractionFailure",
    "SymbolRecord",
    "SymbolTable",
    "TagCache",
    "TagExtractor",
    "format_label",
    "leading_indent_columns",
    "nearest_start_line",
    "parse_tag_line",
    "parse_tag_output",
    "pattern_indent_column",
    "resolve",
    "symbol_label",
]
