"""Regression tests for raw-key decoding.

Covers ESC timing, CSI/SS3 sequences, control keys and UTF-8 input.
These tests protect interactive input handling in raw terminal mode.
"""

import os
import time
import unittest

from mqtui import input as input_mod
from mqtui.input import reader as reader_mod
from mqtui.input import KeyComboBinding, KeyComboRegistry


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        reader_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        reader_mod._PENDING_BYTES.clear()

    def _decode(self, payload: bytes) -> list[str]:
        read_fd, write_fd = os.pipe()
        keys: list[str] = []
        try:
            os.write(write_fd, payload)
            while True:
                key = input_mod.read_key(read_fd, timeout_ms=20)
                if not key:
                    break
                keys.append(key)
        finally:
            os.close(read_fd)
            os.close(write_fd)
        return keys

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"\x1b")
            started = time.monotonic()
            key = input_mod.read_key(read_fd, timeout_ms=20)
            elapsed = time.monotonic() - started
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_arrow_sequences(self) -> None:
        self.assertEqual(
            self._decode(b"\x1b[A\x1b[B\x1b[C\x1b[D"),
            ["UP", "DOWN", "RIGHT", "LEFT"],
        )

    def test_application_mode_arrows(self) -> None:
        self.assertEqual(self._decode(b"\x1bOA\x1bOB"), ["UP", "DOWN"])

    def test_home_and_end_variants(self) -> None:
        self.assertEqual(
            self._decode(b"\x1b[H\x1b[F\x1b[1~\x1b[4~\x1b[7~\x1b[8~"),
            ["HOME", "END", "HOME", "END", "HOME", "END"],
        )

    def test_page_keys_and_delete(self) -> None:
        self.assertEqual(
            self._decode(b"\x1b[5~\x1b[6~\x1b[3~"),
            ["PAGE_UP", "PAGE_DOWN", "DELETE"],
        )

    def test_function_key_one_variants(self) -> None:
        self.assertEqual(self._decode(b"\x1bOP\x1b[11~\x1b[[A"), ["F1", "F1", "F1"])

    def test_modified_arrow_keeps_key(self) -> None:
        self.assertEqual(self._decode(b"\x1b[1;5A"), ["UP"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._decode(b"\x1ba"), ["ESC", "a"])

    def test_control_keys(self) -> None:
        self.assertEqual(
            self._decode(b"\x0c\x7f\r\n\t"),
            ["CTRL_L", "BACKSPACE", "ENTER_CR", "ENTER_LF", "TAB"],
        )

    def test_utf8_characters_are_decoded_whole(self) -> None:
        self.assertEqual(self._decode("é→😀".encode("utf-8")), ["é", "→", "😀"])

    def test_timeout_returns_empty_token(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            key = input_mod.read_key(read_fd, timeout_ms=10)
        finally:
            os.close(read_fd)
            os.close(write_fd)
        self.assertEqual(key, "")

    def test_closed_input_raises_eof(self) -> None:
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"a")
        os.close(write_fd)
        try:
            self.assertEqual(input_mod.read_key(read_fd, timeout_ms=20), "a")
            with self.assertRaises(EOFError):
                input_mod.read_key(read_fd, timeout_ms=20)
        finally:
            os.close(read_fd)


class KeyComboRegistryTests(unittest.TestCase):
    def test_enter_variants_share_one_binding(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_binding(
            KeyComboBinding(("ENTER",), lambda: calls.append("enter"))
        )

        for key in ("ENTER", "ENTER_CR", "ENTER_LF"):
            self.assertTrue(registry.dispatch(key))
        self.assertEqual(calls, ["enter"] * 3)

    def test_unbound_key_is_not_dispatched(self) -> None:
        registry = KeyComboRegistry().register_binding(KeyComboBinding(("q",), lambda: None))
        self.assertFalse(registry.dispatch("x"))
        self.assertIn("q", registry)
        self.assertNotIn("x", registry)

    def test_later_binding_overrides_earlier(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("a",), lambda: calls.append("first")),
            KeyComboBinding(("a",), lambda: calls.append("second")),
        )
        registry.dispatch("a")
        self.assertEqual(calls, ["second"])


if __name__ == "__main__":
    unittest.main()
