import unittest

from _support import FakeFileSystem
from twinpane.core.actions import App, Directory, Tab
from twinpane.core.config import AppConfig
from twinpane.core.errors import ReentrantDispatchError
from twinpane.core.state import MessageboxModal, PanelInfo, PanelSide
from twinpane.core.store import Store
from twinpane.filesystem.sorting import SortAxis, SortOrder

LEFT = PanelSide.LEFT
RIGHT = PanelSide.RIGHT


def _build_fs():
    fs = FakeFileSystem()
    for name in ("a.txt", "b.txt", "c.txt"):
        fs.add_file(f"/src/{name}")
    fs.add_dir("/src/sub")
    fs.add_file("/src/sub/inner.txt")
    fs.add_dir("/dst")
    return fs


def _names(tab):
    return [item.name for item in tab.filtered_items()]


class StoreCursorTests(unittest.TestCase):
    def setUp(self):
        self.fs = _build_fs()
        self.store = Store(self.fs, AppConfig(), start_paths=("/src", "/dst"))

    def _tab(self, side=LEFT):
        return self.store.state.panel(side).active_tab()

    def test_initial_state_lists_both_start_paths(self):
        self.assertEqual(_names(self._tab()), ["a.txt", "b.txt", "c.txt", "sub"])
        self.assertEqual(self._tab(RIGHT).items, ())
        self.assertIsNone(self._tab(RIGHT).cursor)
        self.assertEqual(self.store.state.focused_side, LEFT)

    def test_next_and_previous_move_cursor_and_selection(self):
        self.assertTrue(self.store.dispatch(Tab.Next()))
        self.assertEqual(self._tab().cursor, 1)
        self.assertEqual(self._tab().selected, frozenset({"/src/b.txt"}))

        self.store.dispatch(Tab.Previous())
        self.store.dispatch(Tab.Previous())
        self.assertEqual(self._tab().cursor, 0)
        self.assertEqual(self._tab().selected, frozenset({"/src/a.txt"}))

    def test_cursor_is_clamped_at_the_end(self):
        for _ in range(10):
            self.store.dispatch(Tab.Next())

        self.assertEqual(self._tab().cursor, 3)

    def test_select_next_extends_selection(self):
        self.store.dispatch(Tab.SelectNext())
        self.store.dispatch(Tab.SelectNext())

        self.assertEqual(self._tab().cursor, 2)
        self.assertEqual(self._tab().selected, frozenset({"/src/a.txt", "/src/b.txt", "/src/c.txt"}))

    def test_select_next_first_selects_unselected_cursor_item(self):
        self.store.dispatch(Tab.ClearSelection())

        self.store.dispatch(Tab.SelectNext())

        self.assertEqual(self._tab().cursor, 0)
        self.assertEqual(self._tab().selected, frozenset({"/src/a.txt"}))

    def test_select_prev_extends_upwards(self):
        self.store.dispatch(Tab.Next())
        self.store.dispatch(Tab.Next())

        self.store.dispatch(Tab.SelectPrev())

        self.assertEqual(self._tab().cursor, 1)
        self.assertEqual(self._tab().selected, frozenset({"/src/b.txt", "/src/c.txt"}))

    def test_clear_selection(self):
        self.store.dispatch(Tab.SelectNext())

        self.store.dispatch(Tab.ClearSelection())

        self.assertEqual(self._tab().selected, frozenset())
        self.assertEqual(self._tab().cursor, 1)

    def test_explicit_side_targets_that_panel(self):
        self.fs.add_file("/dst/x")
        self.store.dispatch(Tab.ReloadTab(RIGHT, "/dst"))

        self.store.dispatch(Tab.Next(side=RIGHT))

        self.assertEqual(self._tab(RIGHT).cursor, 0)
        self.assertEqual(self._tab(LEFT).cursor, 0)

    def test_cursor_moves_on_empty_tab_are_harmless(self):
        before = self._tab(RIGHT)

        self.assertTrue(self.store.dispatch(Tab.Next(side=RIGHT)))

        self.assertIs(self._tab(RIGHT), before)


class StoreNavigationTests(unittest.TestCase):
    def setUp(self):
        self.fs = _build_fs()
        self.store = Store(self.fs, AppConfig(), start_paths=("/src", "/dst"))

    def _tab(self, side=LEFT):
        return self.store.state.panel(side).active_tab()

    def test_open_directory_replaces_current_tab(self):
        self.assertTrue(self.store.dispatch(Directory.Open(PanelInfo("/src/sub", 0, LEFT))))

        self.assertEqual(self._tab().path, "/src/sub")
        self.assertEqual(self._tab().name, "sub")
        self.assertEqual(_names(self._tab()), ["inner.txt"])
        self.assertEqual(len(self.store.state.left_panel.tabs), 1)

    def test_navigating_up_focuses_previous_directory(self):
        self.store.dispatch(Directory.Open(PanelInfo("/src/sub", 0, LEFT)))

        self.store.dispatch(Directory.Open(PanelInfo("/src", 0, LEFT)))

        self.assertEqual(self._tab().current_item().name, "sub")

    def test_open_in_new_tab(self):
        self.store.dispatch(Directory.Open(PanelInfo("/src/sub", 0, LEFT), in_new_tab=True))

        panel = self.store.state.left_panel
        self.assertEqual([tab.path for tab in panel.tabs], ["/src", "/src/sub"])
        self.assertEqual(panel.current_tab, 1)

    def test_open_in_right_panel_moves_focus(self):
        self.store.dispatch(Directory.Open(PanelInfo("/src", 0, RIGHT)))

        self.assertEqual(self.store.state.focused_side, RIGHT)
        self.assertEqual(self._tab(RIGHT).path, "/src")

    def test_open_stale_tab_index_is_a_noop(self):
        before = self.store.state

        self.assertFalse(self.store.dispatch(Directory.Open(PanelInfo("/src/sub", 7, LEFT))))

        self.assertIs(self.store.state, before)

    def test_open_missing_directory_reports_failure(self):
        self.assertTrue(self.store.dispatch(Directory.Open(PanelInfo("/nowhere", 0, LEFT))))

        self.assertIsInstance(self.store.state.modal, MessageboxModal)
        self.assertIn("/nowhere", self.store.state.modal.text)
        self.assertEqual(self._tab().path, "/src")

    def test_switch_and_close_tabs(self):
        self.store.dispatch(Directory.Open(PanelInfo("/src/sub", 0, LEFT), in_new_tab=True))

        self.assertTrue(self.store.dispatch(Tab.SwitchTab(LEFT, 0)))
        self.assertEqual(self._tab().path, "/src")
        self.assertFalse(self.store.dispatch(Tab.SwitchTab(LEFT, 5)))

        self.assertTrue(self.store.dispatch(Tab.CloseTab(LEFT, 0)))
        self.assertEqual([tab.path for tab in self.store.state.left_panel.tabs], ["/src/sub"])
        self.assertEqual(self.store.state.left_panel.current_tab, 0)

    def test_last_tab_cannot_be_closed(self):
        self.assertFalse(self.store.dispatch(Tab.CloseTab(LEFT, 0)))
        self.assertEqual(len(self.store.state.left_panel.tabs), 1)

    def test_reload_picks_up_new_entries(self):
        self.fs.add_file("/dst/new.txt")

        self.assertTrue(self.store.dispatch(Tab.ReloadTab(RIGHT, "/dst")))

        self.assertEqual(_names(self._tab(RIGHT)), ["new.txt"])
        self.assertEqual(self._tab(RIGHT).cursor, 0)

    def test_reload_of_vanished_directory_moves_to_parent(self):
        self.store.dispatch(Directory.Open(PanelInfo("/src/sub", 0, RIGHT)))
        self.fs.delete_dir("/src/sub")

        self.store.dispatch(Tab.ReloadTab(RIGHT, "/src/sub"))

        self.assertEqual(self._tab(RIGHT).path, "/src")

    def test_reload_without_matching_tab_returns_false(self):
        self.assertFalse(self.store.dispatch(Tab.ReloadTab(RIGHT, "/elsewhere")))

    def test_start_path_that_is_not_a_directory_falls_back_to_parent(self):
        store = Store(self.fs, AppConfig(), start_paths=("/src/a.txt", "/gone/deeper"))

        self.assertEqual(store.state.left_panel.active_tab().path, "/src")
        self.assertEqual(store.state.right_panel.active_tab().path, "/")


class StoreAppActionTests(unittest.TestCase):
    def setUp(self):
        self.fs = _build_fs()
        self.fs.add_file("/src/.hidden")

    def test_show_hidden_false_filters_dotfiles(self):
        store = Store(self.fs, AppConfig(show_hidden=False), start_paths=("/src", "/dst"))

        self.assertNotIn(".hidden", _names(store.state.left_panel.active_tab()))

    def test_change_sort_reloads_tabs(self):
        store = Store(self.fs, AppConfig(), start_paths=("/src", "/dst"))

        store.dispatch(App.ChangeSort(SortAxis.NAME, SortOrder.DESC))

        self.assertEqual(_names(store.state.left_panel.active_tab())[0], "sub")
        self.assertEqual(store.state.config.sort_policy().by_name, SortOrder.DESC)

    def test_focus_panel_and_quit(self):
        store = Store(self.fs, AppConfig(), start_paths=("/src", "/dst"))

        store.dispatch(App.FocusPanel(RIGHT))
        store.dispatch(App.Quit())

        self.assertEqual(store.state.focused_side, RIGHT)
        self.assertFalse(store.running)

    def test_messageboxes_accumulate_until_closed(self):
        store = Store(self.fs, AppConfig(), start_paths=("/src", "/dst"))

        store.dispatch(App.ShowModal(MessageboxModal("first")))
        store.dispatch(App.ShowModal(MessageboxModal("second")))

        self.assertEqual(store.state.modal.text, "first\nsecond")
        self.assertTrue(store.dispatch(App.CloseModal()))
        self.assertIsNone(store.state.modal)
        self.assertFalse(store.dispatch(App.CloseModal()))

    def test_unknown_action_is_reported(self):
        store = Store(self.fs, AppConfig(), start_paths=("/src", "/dst"))

        with self.assertLogs("twinpane.core.store", level="WARNING"):
            handled = store.dispatch(object())

        self.assertFalse(handled)
        self.assertIsInstance(store.state.modal, MessageboxModal)


class StoreObserverTests(unittest.TestCase):
    def setUp(self):
        self.store = Store(_build_fs(), AppConfig(), start_paths=("/src", "/dst"))

    def test_observers_receive_each_new_snapshot(self):
        seen = []
        unsubscribe = self.store.subscribe(seen.append)

        self.store.dispatch(Tab.Next())
        unsubscribe()
        self.store.dispatch(Tab.Next())

        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].left_panel.active_tab().cursor, 1)

    def test_rejected_actions_do_not_notify(self):
        seen = []
        self.store.subscribe(seen.append)

        self.store.dispatch(Tab.CloseTab(LEFT, 0))

        self.assertEqual(seen, [])

    def test_dispatch_from_observer_is_rejected(self):
        def _observer(_state):
            self.store.dispatch(Tab.Next())

        self.store.subscribe(_observer)

        with self.assertRaises(ReentrantDispatchError):
            self.store.dispatch(Tab.Next())

        self.assertEqual(self.store.state.left_panel.active_tab().cursor, 1)


if __name__ == "__main__":
    unittest.main()
