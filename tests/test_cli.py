"""
Tests for CLI entry points.

These tests focus on:
- Basic CLI argument validation (show requires a path)
- Building indexes inside a temporary site root
  (to avoid touching real data during tests)
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from apfrq.cli import build_parser, main


class TestCLI(unittest.TestCase):
    def _run(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                main(argv)
        return ctx.exception.code, out.getvalue()

    def test_cli_show_requires_path(self) -> None:
        # show without a path should exit with nonzero
        code, _ = self._run(["show", ""])
        self.assertNotEqual(code, 0)

    def test_cli_build_without_courses_fails(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            code, out = self._run(["build", "--root", d])
        self.assertEqual(code, 1)
        self.assertIn("Missing folder", out)

    def test_cli_build_writes_indexes(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            year = Path(d) / "courses" / "ap-biology" / "2021"
            year.mkdir(parents=True)
            (year / "Free-Response Questions.pdf").write_bytes(b"%PDF")

            code, out = self._run(["build", "--root", d])

            self.assertEqual(code, 0)
            self.assertTrue((Path(d) / "data" / "courses.json").exists())
            self.assertTrue((Path(d) / "data" / "course-ap-biology.json").exists())
        self.assertIn("Courses indexed: 1", out)

    def test_cli_show_not_found_needs_no_data(self) -> None:
        code, out = self._run(["show", "/nope", "--base-url", "http://127.0.0.1:9"])
        self.assertEqual(code, 0)
        self.assertIn("404", out)

    def test_cli_rejects_unknown_mode(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                build_parser().parse_args(["show", "/", "--mode", "query"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
