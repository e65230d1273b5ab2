import types
import unittest
from unittest import mock

from _support import FakeCursesMixin, make_stdscr


class UtilsCoreTests(FakeCursesMixin, unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.utils = cls.load("twinpane.utils")
        cls.constants = cls.load("twinpane.constants")

    def test_init_colors_registers_every_pair(self):
        with mock.patch.object(self.utils.curses, "init_pair") as init_pair:
            self.utils.init_colors()

        self.assertEqual(init_pair.call_count, len(self.constants.COLOR_PAIRS))

    def test_init_colors_stops_without_color_support(self):
        with mock.patch.object(self.utils.curses, "start_color", side_effect=self.fake_curses.error()), \
                mock.patch.object(self.utils.curses, "init_pair") as init_pair:
            self.utils.init_colors()

        init_pair.assert_not_called()

    def test_safe_addstr_clips_and_handles_errors(self):
        win = types.SimpleNamespace(
            getmaxyx=mock.Mock(return_value=(5, 10)),
            addnstr=mock.Mock(),
        )
        self.utils.safe_addstr(win, 1, 1, "hello", 0)
        win.addnstr.assert_called_once_with(1, 1, "hello", 8, 0)

        win.addnstr.reset_mock()
        self.utils.safe_addstr(win, 7, 0, "out", 0)
        self.utils.safe_addstr(win, 0, 9, "edge", 0)
        win.addnstr.assert_not_called()

        win.addnstr.side_effect = self.fake_curses.error()
        self.utils.safe_addstr(win, 0, 0, "boom", 0)

    def test_normalize_key_code(self):
        self.assertEqual(self.utils.normalize_key_code("\n"), 10)
        self.assertEqual(self.utils.normalize_key_code("\x1b"), 27)
        self.assertEqual(self.utils.normalize_key_code("a"), 97)
        self.assertEqual(self.utils.normalize_key_code(258), 258)
        self.assertIsNone(self.utils.normalize_key_code("ab"))
        self.assertIsNone(self.utils.normalize_key_code(None))

    def test_key_char_only_returns_printable_text(self):
        self.assertEqual(self.utils.key_char("é"), "é")
        self.assertEqual(self.utils.key_char(65), "A")
        self.assertIsNone(self.utils.key_char("\t"))
        self.assertIsNone(self.utils.key_char(258))

    def test_fit_text_pads_and_clips_by_cell_width(self):
        self.assertEqual(self.utils.fit_text("abc", 5), "abc  ")
        self.assertEqual(self.utils.fit_text("abcdef", 4), "abc~")
        self.assertEqual(self.utils.fit_text("日本語", 4), "日~ ")
        self.assertEqual(self.utils.fit_text("abc", 0), "")
        self.assertEqual(self.utils.cell_width("日本"), 4)

    def test_draw_box_ascii_fallback(self):
        stdscr = make_stdscr(10, 20)

        self.utils.draw_box(stdscr, 0, 0, 3, 5, unicode=False)

        self.assertEqual([w[2] for w in stdscr.writes], ["+---+", "|", "|", "+---+"])


if __name__ == "__main__":
    unittest.main()
