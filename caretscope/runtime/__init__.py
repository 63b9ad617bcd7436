"""Host-facing runtime: settings, filetype detection and trigger handlers."""

from __future__ import annotations

from .config import TrackerSettings, load_settings, save_settings
from .tracker import BufferSnapshot, CurrentSymbolTracker, IdleGate, ResolveOutcome

__all__ = [
    "BufferSnapshot",
    "CurrentSymbolTracker",
    "IdleGate",
    "ResolveOutcome",
    "TrackerSettings",
    "load_settings",
    "save_settings",
]
