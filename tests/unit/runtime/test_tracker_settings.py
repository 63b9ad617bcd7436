"""Tests for persisted tracker settings.

Malformed config data must fall back to defaults key by key.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from caretscope.runtime import config


class TrackerSettingsTests(unittest.TestCase):
    def test_missing_config_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("caretscope.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                settings = config.load_settings()
        self.assertEqual(settings, config.TrackerSettings())
        self.assertEqual(settings.idle_delay_ms, 300)

    def test_malformed_json_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("caretscope.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_settings(), config.TrackerSettings())

    def test_invalid_values_fall_back_individually(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps(
                    {
                        "ctags_command": "  /opt/ctags  ",
                        "idle_delay_ms": True,
                        "extract_timeout_seconds": -1,
                        "language": 42,
                    }
                ),
                encoding="utf-8",
            )
            with mock.patch("caretscope.runtime.config.CONFIG_PATH", config_path):
                settings = config.load_settings()

        self.assertEqual(settings.ctags_command, "/opt/ctags")
        self.assertEqual(settings.idle_delay_ms, config.DEFAULT_IDLE_DELAY_MS)
        self.assertEqual(settings.extract_timeout_seconds, 2.0)
        self.assertEqual(settings.language, "python")

    def test_comment_marker_follows_language_when_unset(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"language": "lua"}), encoding="utf-8")
            with mock.patch("caretscope.runtime.config.CONFIG_PATH", config_path):
                settings = config.load_settings()
        self.assertEqual(settings.comment_marker, "--")

    def test_save_settings_round_trips_and_keeps_unrelated_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("caretscope.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"unrelated": 1})
                expected = config.TrackerSettings(ctags_command="uctags", idle_delay_ms=750)
                config.save_settings(expected)

                self.assertEqual(config.load_settings(), expected)
                self.assertEqual(config.load_config().get("unrelated"), 1)


if __name__ == "__main__":
    unittest.main()
