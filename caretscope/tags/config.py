"""Tag-tool invocation and indentation constants."""

from __future__ import annotations

DEFAULT_CTAGS_COMMAND = "ctags"
DEFAULT_LANGUAGE = "python"
DEFAULT_EXTRACT_TIMEOUT_SECONDS = 2.0

TAB_COLUMNS = 8
# The quoted pattern starts with "/^"; indentation counts from past those two.
PATTERN_INDENT_BASE = 2

COMMENT_MARKER_BY_LANGUAGE: dict[str, str] = {
    "python": "#",
    "ruby": "#",
    "perl": "#",
    "sh": "#",
    "tcl": "#",
    "yaml": "#",
    "lua": "--",
    "haskell": "--",
    "sql": "--",
}
DEFAULT_COMMENT_MARKER = "#"

SOURCE_SUFFIX_BY_LANGUAGE: dict[str, str] = {
    "python": ".py",
    "ruby": ".rb",
    "perl": ".pl",
    "sh": ".sh",
    "tcl": ".tcl",
    "yaml": ".yaml",
    "lua": ".lua",
    "haskell": ".hs",
    "sql": ".sql",
}


def ctags_arguments(language: str) -> list[str]:
    """Return fixed tool flags: one language, unsorted tags on stdout.

    ``--fields=Kns`` adds long kind names, ``line:`` numbers and the enclosing
    scope. The file list is read from stdin.
    """
    return [
        f"--language-force={language}",
        "-f",
        "-",
        "--format=2",
        "--excmd=pattern",
        "--sort=no",
        "--fields=Kns",
        "-L",
        "-",
    ]


def comment_marker_for(language: str) -> str:
    return COMMENT_MARKER_BY_LANGUAGE.get(language.lower(), DEFAULT_COMMENT_MARKER)
