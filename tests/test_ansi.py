"""Regression tests for ANSI-aware width math and line shaping."""

import unittest

from mqtui.render import ansi as ansi_mod


class DisplayWidthTests(unittest.TestCase):
    def test_escape_sequences_are_zero_width(self) -> None:
        self.assertEqual(ansi_mod.display_width("\x1b[31mab\x1b[0m"), 2)

    def test_wide_characters_take_two_columns(self) -> None:
        self.assertEqual(ansi_mod.display_width("界a"), 3)


class ShapeLineTests(unittest.TestCase):
    def test_clip_keeps_escapes_and_drops_overflow(self) -> None:
        self.assertEqual(ansi_mod.clip_ansi_line("\x1b[1mabcdef", 3), "\x1b[1mabc")

    def test_clip_does_not_split_wide_character(self) -> None:
        self.assertEqual(ansi_mod.clip_ansi_line("a界", 2), "a")

    def test_fit_pads_to_width(self) -> None:
        self.assertEqual(ansi_mod.fit_ansi_line("abc", 5), "abc  ")
        self.assertEqual(ansi_mod.fit_ansi_line("abcdef", 4), "abcd")

    def test_sanitize_escapes_control_bytes(self) -> None:
        self.assertEqual(ansi_mod.sanitize_terminal_text("a\x1b[2Jb"), "a\\x1b[2Jb")
        self.assertEqual(ansi_mod.sanitize_terminal_text("x\ry"), "x\\x0dy")
        self.assertEqual(ansi_mod.sanitize_terminal_text("tab\tok\n"), "tab\tok\n")


if __name__ == "__main__":
    unittest.main()
