"""Trigger handlers that keep per-window current-symbol labels up to date.

The host calls ``on_idle`` and ``on_buffer_enter`` with a buffer snapshot and
``on_buffer_close`` when a buffer goes away. Every trigger runs the whole
pipeline synchronously: cache lookup, optional re-tag, resolution, label.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..tags import (
    ExtractionFailure,
    SymbolRecord,
    TagCache,
    TagExtractor,
    format_label,
    resolve,
)
from .config import TrackerSettings
from .filetype import matches_language

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BufferSnapshot:
    """Host state captured at trigger time."""

    buffer_id: Hashable
    revision: int
    lines: Sequence[str]
    caret: tuple[int, int]  # (1-based line, column)
    window_id: Hashable = 0
    filetype: str | None = None
    path: Path | None = None

    @property
    def caret_line(self) -> int:
        return self.caret[0]


@dataclass(frozen=True)
class ResolveOutcome:
    """Result handed back to trigger handlers instead of raising."""

    label: str = ""
    record: SymbolRecord | None = None
    error_kind: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, label: str, record: SymbolRecord | None = None) -> ResolveOutcome:
        return cls(label=label, record=record)

    @classmethod
    def failure(cls, kind: str, message: str) -> ResolveOutcome:
        return cls(error_kind=kind, error_message=message)


class IdleGate:
    """Report when the editor has been quiet for ``delay_ms`` milliseconds.

    Elapsed time is rounded to whole milliseconds before comparing. Fires
    once per quiet period; ``note_activity`` re-arms it.
    """

    def __init__(self, delay_ms: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.delay_ms = max(0, int(delay_ms))
        self._clock = clock
        self._last_activity = clock()
        self._fired = False

    def note_activity(self) -> None:
        self._last_activity = self._clock()
        self._fired = False

    def _elapsed_ms(self) -> int:
        return round((self._clock() - self._last_activity) * 1000)

    def seconds_until_idle(self) -> float | None:
        """Remaining wait before firing, or ``None`` once already fired."""
        if self._fired:
            return None
        return max(0, self.delay_ms - self._elapsed_ms()) / 1000.0

    def should_fire(self) -> bool:
        if self._fired or self._elapsed_ms() < self.delay_ms:
            return False
        self._fired = True
        return True


class CurrentSymbolTracker:
    """Owns the tag cache and the per-window status labels."""

    def __init__(
        self,
        settings: TrackerSettings | None = None,
        cache: TagCache | None = None,
        extractor: TagExtractor | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or TrackerSettings()
        self.cache = cache if cache is not None else TagCache()
        self.extractor = extractor or TagExtractor(
            ctags_command=self.settings.ctags_command,
            language=self.settings.language,
            timeout_seconds=self.settings.extract_timeout_seconds,
        )
        self.idle_gate = IdleGate(self.settings.idle_delay_ms, clock=clock)
        self._status: dict[Hashable, str] = {}

    def supports(self, snapshot: BufferSnapshot) -> bool:
        return matches_language(snapshot.filetype, snapshot.path, self.settings.language)

    def resolve(self, snapshot: BufferSnapshot) -> ResolveOutcome:
        """Compute the label for ``snapshot`` without touching status slots.

        Extraction failures come back as a failed outcome; other exceptions
        propagate.
        """
        if not self.supports(snapshot):
            return ResolveOutcome.success("")

        def refresh():
            return self.extractor.extract(snapshot.lines, buffer_id=snapshot.buffer_id)

        try:
            table = self.cache.get_or_refresh(snapshot.buffer_id, snapshot.revision, refresh)
        except ExtractionFailure as exc:
            return ResolveOutcome.failure("extraction", str(exc))

        record = resolve(table, snapshot.caret_line, snapshot.lines, self.settings.comment_marker)
        return ResolveOutcome.success(format_label(record), record)

    def _update(self, snapshot: BufferSnapshot) -> ResolveOutcome:
        """Resolve and publish; failures keep the previous label."""
        try:
            outcome = self.resolve(snapshot)
        except Exception as exc:
            logger.exception("current-symbol resolution crashed for buffer %s", snapshot.buffer_id)
            return ResolveOutcome.failure("internal", str(exc))

        if outcome.ok:
            self._status[snapshot.window_id] = outcome.label
        else:
            logger.warning(
                "current symbol not updated for buffer %s (%s): %s",
                snapshot.buffer_id,
                outcome.error_kind,
                outcome.error_message,
            )
        return outcome

    def on_idle(self, snapshot: BufferSnapshot) -> ResolveOutcome:
        return self._update(snapshot)

    def note_activity(self) -> None:
        """Record a keystroke; the next idle update waits a full delay again."""
        self.idle_gate.note_activity()

    def poll_idle(self, snapshot: BufferSnapshot) -> ResolveOutcome | None:
        """Run ``on_idle`` once the configured idle delay has elapsed.

        Returns ``None`` while the editor is still busy or when this quiet
        period was already handled.
        """
        if not self.idle_gate.should_fire():
            return None
        return self.on_idle(snapshot)

    def on_buffer_enter(self, snapshot: BufferSnapshot) -> ResolveOutcome:
        return self._update(snapshot)

    def on_buffer_close(self, buffer_id: Hashable) -> None:
        self.cache.evict(buffer_id)

    def status_for(self, window_id: Hashable) -> str:
        return self._status.get(window_id, "")

    def forget_window(self, window_id: Hashable) -> None:
        self._status.pop(window_id, None)
