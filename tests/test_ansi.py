"""Regression tests for ANSI width measurement.

Alignment of annotations depends on escape sequences costing zero columns
and tabs expanding to the next tab stop.
"""

import unittest

from lsgit import ansi as ansi_mod


class VisibleWidthTests(unittest.TestCase):
    def test_escape_sequences_do_not_count(self) -> None:
        self.assertEqual(ansi_mod.visible_width("\033[01;34msrc\033[0m"), 3)

    def test_tabs_expand_to_next_stop(self) -> None:
        self.assertEqual(ansi_mod.visible_width("abc\tx"), 9)
        self.assertEqual(ansi_mod.visible_width("\t"), 8)

    def test_wide_characters_take_two_columns(self) -> None:
        self.assertEqual(ansi_mod.visible_width("日本"), 4)

    def test_strip_ansi_keeps_text(self) -> None:
        self.assertEqual(ansi_mod.strip_ansi("\033[1;31mred\033[0m plain"), "red plain")

    def test_colorize_skips_empty_sgr(self) -> None:
        self.assertEqual(ansi_mod.colorize("text", ""), "text")
        self.assertEqual(ansi_mod.colorize("text", "\033[32m"), "\033[32mtext\033[0m")


if __name__ == "__main__":
    unittest.main()
