"""Run ctags over a buffer snapshot and parse the result.

The buffer text is written to a per-buffer, per-process temporary file whose
path is handed to ctags on stdin. The file is removed on every exit path.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
import subprocess
import tempfile
from collections.abc import Hashable, Sequence

from .config import (
    DEFAULT_CTAGS_COMMAND,
    DEFAULT_EXTRACT_TIMEOUT_SECONDS,
    DEFAULT_LANGUAGE,
    SOURCE_SUFFIX_BY_LANGUAGE,
    ctags_arguments,
)
from .parse import parse_tag_output
from .types import ExtractionFailure, SymbolTable

logger = logging.getLogger(__name__)

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]")
_BUFFER_TOKEN_CHARS = 40


def _buffer_token(buffer_id: Hashable) -> str:
    """Short filename-safe token; long ids keep a readable tail plus a digest."""
    raw = str(buffer_id)
    token = _UNSAFE_NAME_RE.sub("_", raw)
    if len(token) <= _BUFFER_TOKEN_CHARS:
        return token
    digest = hashlib.sha1(raw.encode("utf-8", errors="surrogateescape")).hexdigest()[:12]
    return f"{token[-_BUFFER_TOKEN_CHARS:]}-{digest}"


def _temp_prefix(buffer_id: Hashable | None) -> str:
    """Build a temp-file prefix unique to this process and buffer."""
    buffer_token = _buffer_token(buffer_id) if buffer_id is not None else "buffer"
    return f"caretscope-{os.getpid()}-{buffer_token}-"


def _write_lines(fd: int, lines: Sequence[str]) -> None:
    with os.fdopen(fd, "w", encoding="utf-8", errors="replace", newline="\n") as handle:
        for line in lines:
            handle.write(line.rstrip("\r\n"))
            handle.write("\n")


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.debug("could not remove temporary tag input %s: %s", path, exc)


class TagExtractor:
    """Produce a ``SymbolTable`` for buffer text via an external ctags binary."""

    def __init__(
        self,
        ctags_command: str = DEFAULT_CTAGS_COMMAND,
        language: str = DEFAULT_LANGUAGE,
        timeout_seconds: float | None = DEFAULT_EXTRACT_TIMEOUT_SECONDS,
    ) -> None:
        self.ctags_command = ctags_command
        self.language = language
        self.timeout_seconds = timeout_seconds

    def command(self) -> list[str]:
        return [self.ctags_command, *ctags_arguments(self.language)]

    def _run(self, input_path: str) -> str:
        """Run the tool and return its stdout, raising ``ExtractionFailure``."""
        cmd = self.command()
        try:
            proc = subprocess.run(
                cmd,
                input=input_path + "\n",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExtractionFailure(
                f"{self.ctags_command} timed out after {self.timeout_seconds}s"
            ) from exc
        except OSError as exc:
            raise ExtractionFailure(f"failed to run {self.ctags_command}: {exc}") from exc

        stdout = proc.stdout or ""
        if proc.returncode != 0 and not stdout.strip():
            err = (proc.stderr or "").strip() or f"{self.ctags_command} failed with exit code {proc.returncode}"
            raise ExtractionFailure(err)
        return stdout

    def extract(self, lines: Sequence[str], buffer_id: Hashable | None = None) -> SymbolTable:
        """Tag ``lines`` and return the resulting table.

        Malformed output lines are skipped and reported once through the
        module logger; they never fail the extraction.
        """
        suffix = SOURCE_SUFFIX_BY_LANGUAGE.get(self.language.lower(), ".txt")
        try:
            fd, input_path = tempfile.mkstemp(prefix=_temp_prefix(buffer_id), suffix=suffix)
        except OSError as exc:
            raise ExtractionFailure(f"failed to create temporary tag input: {exc}") from exc

        try:
            _write_lines(fd, lines)
            stdout = self._run(input_path)
        except OSError as exc:
            raise ExtractionFailure(f"failed to write temporary tag input: {exc}") from exc
        finally:
            _remove_quietly(input_path)

        table = parse_tag_output(stdout.splitlines())
        if table.warnings:
            logger.warning(
                "skipped %d malformed tag line(s) for buffer %s; first: %s",
                len(table.warnings),
                buffer_id,
                table.warnings[0],
            )
        return table
