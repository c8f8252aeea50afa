"""Regression tests for raw-key decoding.

Covers ESC timing, CSI/SS3 sequences, and control-key token mapping.
"""

import os
import time
import unittest

from lazyfinder import input as input_mod


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read_all(self, payload: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._read_all(b"\x1b", 1)
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read_all(b"\x1ba", 2), ["ESC", "a"])

    def test_arrow_and_paging_sequences(self) -> None:
        payload = b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[5~\x1b[6~\x1b[H\x1b[F\x1b[3~"
        self.assertEqual(
            self._read_all(payload, 9),
            ["UP", "DOWN", "RIGHT", "LEFT", "PAGE_UP", "PAGE_DOWN", "HOME", "END", "DELETE"],
        )

    def test_f1_variants(self) -> None:
        self.assertEqual(self._read_all(b"\x1bOP\x1b[11~", 2), ["F1", "F1"])

    def test_modified_arrow_collapses_to_bare_key(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[1;5A", 1), ["UP"])

    def test_control_keys(self) -> None:
        self.assertEqual(
            self._read_all(b"\t\r\x7f\x15\x03", 5),
            ["TAB", "ENTER", "BACKSPACE", "CTRL_U", "CTRL_C"],
        )

    def test_multibyte_utf8_character(self) -> None:
        self.assertEqual(self._read_all("é€".encode("utf-8"), 2), ["é", "€"])

    def test_timeout_returns_empty_string(self) -> None:
        self.assertEqual(self._read_all(b"", 1), [""])


if __name__ == "__main__":
    unittest.main()
