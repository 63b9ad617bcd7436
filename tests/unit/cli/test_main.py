"""CLI behavior tests.

Verifies how ``caretscope.cli.main`` reads files, applies overrides and
reports labels or tag tables. ctags is replaced with a patched runner.
"""

from __future__ import annotations

import argparse
import io
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from caretscope import cli
from caretscope.runtime import TrackerSettings

SOURCE = "class Foo:\n    def bar(self):\n        return 1\n\ndef top():\n    pass\n"
TAGS = (
    'Foo\tin.py\t/^class Foo:$/;"\tclass\tline:1\n'
    'bar\tin.py\t/^    def bar(self):$/;"\tmember\tline:2\tclass:Foo\n'
    'top\tin.py\t/^def top():$/;"\tfunction\tline:5\n'
)


def fake_run(cmd, **kwargs):
    return subprocess.CompletedProcess(cmd, 0, stdout=TAGS, stderr="")


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "sample.py"
        self.path.write_text(SOURCE, encoding="utf-8")
        patcher = mock.patch("caretscope.cli.load_settings", return_value=TrackerSettings())
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_cli(self, argv: list[str], run=fake_run) -> str:
        with mock.patch("caretscope.tags.extractor.subprocess.run", side_effect=run) as patched, mock.patch(
            "sys.stdout", new_callable=io.StringIO
        ) as stdout:
            cli.main(argv)
        self.last_run = patched
        return stdout.getvalue()

    def test_prints_label_for_position(self) -> None:
        self.assertEqual(self.run_cli([str(self.path), "3"]), "[in Foo.bar() (member)]\n")
        self.assertEqual(self.run_cli([str(self.path), "6:4"]), "[in top (function)]\n")

    def test_tags_flag_prints_table(self) -> None:
        out = self.run_cli([str(self.path), "--tags"])
        rows = out.splitlines()
        self.assertEqual(len(rows), 3)
        self.assertTrue(rows[1].startswith("L    2"))
        self.assertTrue(rows[1].endswith("Foo.bar()"))

    def test_overrides_reach_ctags_command(self) -> None:
        self.run_cli([str(self.path), "1", "--ctags", "uctags", "--timeout", "0.5"])
        cmd = self.last_run.call_args.args[0]
        self.assertEqual(cmd[0], "uctags")
        self.assertEqual(self.last_run.call_args.kwargs["timeout"], 0.5)

    def test_language_override_uses_that_language_comment_marker(self) -> None:
        lua_path = Path(self._tmp.name) / "sample.lua"
        lua_path.write_text("function run()\n  local x = 1\n-- note\n  return x\n", encoding="utf-8")

        def lua_run(cmd, **kwargs):
            return subprocess.CompletedProcess(
                cmd, 0, stdout='run\tin.lua\t/^function run()$/;"\tfunction\tline:1\n', stderr=""
            )

        out = self.run_cli([str(lua_path), "4", "--language", "lua"], run=lua_run)
        self.assertEqual(out, "[in run (function)]\n")
        self.assertIn("--language-force=lua", self.last_run.call_args.args[0])

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main([str(self.path.with_name("missing.py")), "1"])
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_extraction_failure_exits_with_message(self) -> None:
        def missing(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        with self.assertRaises(SystemExit) as ctx:
            self.run_cli([str(self.path), "1"], run=missing)
        self.assertIn("Tag extraction failed", str(ctx.exception.code))

    def test_position_required_without_tags(self) -> None:
        with mock.patch("sys.stderr", new_callable=io.StringIO), self.assertRaises(SystemExit) as ctx:
            cli.main([str(self.path)])
        self.assertEqual(ctx.exception.code, 2)

    def test_invalid_position_rejected(self) -> None:
        with self.assertRaises(argparse.ArgumentTypeError):
            cli._position("0")
        self.assertEqual(cli._position("12:3"), (12, 3))


if __name__ == "__main__":
    unittest.main()
