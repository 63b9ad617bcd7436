"""Buffer language detection backed by Pygments lexer lookup."""

from __future__ import annotations

from pathlib import Path

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound


def language_aliases_for_path(path: Path) -> tuple[str, ...]:
    """Return lowercase Pygments aliases for ``path``; empty when unknown."""
    try:
        lexer = get_lexer_for_filename(path.name)
    except ClassNotFound:
        return ()
    aliases = tuple(alias.lower() for alias in getattr(lexer, "aliases", ()) or ())
    if aliases:
        return aliases
    return (lexer.name.lower(),)


def matches_language(filetype: str | None, path: Path | None, language: str) -> bool:
    """Decide whether a buffer is in ``language``.

    An explicit host ``filetype`` wins; otherwise the path is looked up.
    """
    wanted = language.lower()
    if filetype:
        return filetype.lower() == wanted
    if path is None:
        return False
    return wanted in language_aliases_for_path(path)
