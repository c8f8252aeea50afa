"""Event-loop driving with a fake terminal and scripted key input."""

from __future__ import annotations

import contextlib
import os
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from lazyfinder.config import Settings
from lazyfinder.runtime import loop as loop_mod
from lazyfinder.runtime.app import App


class _FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[str] = []
        self.raw_entered = False
        self.raw_exited = False

    @contextlib.contextmanager
    def raw_mode(self):
        self.raw_entered = True
        try:
            yield
        finally:
            self.raw_exited = True

    def write(self, text: str) -> None:
        self.frames.append(text)


class _IdleWorker:
    def __init__(self) -> None:
        self.scheduled: list[tuple[str, str]] = []

    def schedule(self, kind: str, query: str, *, refresh: bool = False) -> int:
        self.scheduled.append((kind, query))
        return len(self.scheduled)

    def is_current(self, request) -> bool:
        return True

    def drain_results(self) -> list:
        return []


class RunMainLoopTests(unittest.TestCase):
    def test_loop_redraws_handles_keys_and_quits(self) -> None:
        app = App(SimpleNamespace(root=Path("/tmp/project")), worker=_IdleWorker(), show_preview=False)
        app.session.file_view.set_results(["a.py", "b.py", "c.py"])
        terminal = _FakeTerminal()

        with mock.patch.object(loop_mod, "read_key", side_effect=["", "j", "j", "q"]), mock.patch.object(
            loop_mod.shutil, "get_terminal_size", return_value=os.terminal_size((80, 12))
        ):
            loop_mod.run_main_loop(app, terminal, 0, style="monokai", no_color=True)

        self.assertTrue(terminal.raw_entered)
        self.assertTrue(terminal.raw_exited)
        self.assertEqual(app.session.selected_index, 2)
        self.assertEqual(app.visible_rows, 9)
        # Initial draw plus one per selection change; idle ticks do not redraw.
        self.assertEqual(len(terminal.frames), 3)
        self.assertFalse(app.session.dirty)


class RunAppTests(unittest.TestCase):
    def test_requires_interactive_terminal(self) -> None:
        with mock.patch.object(loop_mod.os, "isatty", return_value=False), mock.patch.object(
            loop_mod, "SearchEngine"
        ) as engine_cls:
            with self.assertRaises(SystemExit):
                loop_mod.run_app(Path("."), Settings())
        engine_cls.assert_not_called()

    def test_engine_is_closed_when_loop_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            with mock.patch.object(loop_mod.os, "isatty", return_value=True), mock.patch.object(
                loop_mod.sys, "stdin", SimpleNamespace(fileno=lambda: 0)
            ), mock.patch.object(loop_mod.sys, "stdout", SimpleNamespace(fileno=lambda: 1)), mock.patch.object(
                loop_mod, "run_main_loop", side_effect=RuntimeError("boom")
            ), mock.patch.object(loop_mod, "SearchEngine") as engine_cls, mock.patch.object(
                loop_mod, "TerminalController"
            ):
                engine_cls.return_value.root = root
                with self.assertRaises(RuntimeError):
                    loop_mod.run_app(root, Settings(page_size=5), initial_pattern="x")

        engine_cls.return_value.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
