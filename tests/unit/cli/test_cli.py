"""CLI argument handling and non-interactive output modes."""

from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from lazyfinder import cli
from lazyfinder.config import Settings


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("lazyfinder.cli.load_settings", return_value=Settings())
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_list_prints_sorted_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root, "b.txt", "x\n")
            _write(root, "a/c.txt", "x\n")
            stdout = io.StringIO()

            with redirect_stdout(stdout):
                cli.main(["-d", str(root), "--list"])

        self.assertEqual(stdout.getvalue(), "a/c.txt\nb.txt\n")

    def test_list_with_pattern_is_fuzzy_filtered(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("src/main.rs", "src/lib.rs", "README.md"):
                _write(root, name, "x\n")
            stdout = io.StringIO()

            with redirect_stdout(stdout):
                cli.main(["--directory", str(root), "--list", "--pattern", "main"])

        self.assertEqual(stdout.getvalue().splitlines(), ["src/main.rs"])

    def test_grep_prints_path_line_text(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root, "a.txt", "Hello\nhello world\n")
            _write(root, "b.txt", "bye\n")
            stdout = io.StringIO()

            with redirect_stdout(stdout):
                cli.main(["-d", str(root), "--grep", "hello"])

        self.assertEqual(stdout.getvalue(), "a.txt:1:Hello\na.txt:2:hello world\n")

    def test_missing_directory_exits_with_message(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "nope"
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-d", str(missing)])

        self.assertEqual(str(ctx.exception.code), f"Directory not found: {missing}")

    def test_file_as_directory_exits_with_message(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("x\n", encoding="utf-8")
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["-d", str(target), "--list"])

        self.assertIn("not a directory", str(ctx.exception.code))

    def test_interactive_mode_passes_overrides_to_runtime(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            with mock.patch("lazyfinder.cli.run_app") as run_app:
                cli.main(["-d", str(root), "-p", "foo", "--page-size", "50", "--style", "native", "--no-color"])

        run_app.assert_called_once()
        path, settings = run_app.call_args.args
        self.assertEqual(path, root)
        self.assertEqual(settings.page_size, 50)
        self.assertEqual(settings.style, "native")
        self.assertEqual(run_app.call_args.kwargs, {"initial_pattern": "foo", "no_color": True})

    def test_page_size_must_be_positive(self) -> None:
        stderr = io.StringIO()
        with mock.patch("sys.stderr", stderr), self.assertRaises(SystemExit):
            cli.main(["--page-size", "0"])
        self.assertIn("value must be >= 1", stderr.getvalue())

    def test_list_and_grep_are_mutually_exclusive(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit):
            cli.main(["--list", "--grep", "x"])


if __name__ == "__main__":
    unittest.main()
