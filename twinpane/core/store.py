"""
Central state store for twinpane.

``Store`` owns the single ``AppState`` and is the only thing that changes it.
Callers hand it one action at a time through ``dispatch``; the matching
transition runs to completion, the new snapshot replaces the old one in a
single assignment and only then are observers notified.
"""
import logging
import os
from dataclasses import replace

from . import file_operations as ops
from .actions import App, Directory, File, Search, Symlink, Tab, action_name, serialize_action
from .config import AppConfig
from .errors import ErrorKind, OperationFailure, ReentrantDispatchError
from .state import (
    MODAL_TYPES,
    CREATE_KINDS,
    AppState,
    CreateModal,
    MessageboxModal,
    PanelSide,
    PanelState,
    RenameModal,
    TabState,
)

LOGGER = logging.getLogger(__name__)


class Store:
    """Single owner of the application state tree."""

    _DISPATCH = {
        Tab.Next: '_tab_next',
        Tab.Previous: '_tab_previous',
        Tab.SelectNext: '_tab_select_next',
        Tab.SelectPrev: '_tab_select_prev',
        Tab.ClearSelection: '_tab_clear_selection',
        Tab.ReloadTab: '_tab_reload',
        Tab.SwitchTab: '_tab_switch',
        Tab.CloseTab: '_tab_close',
        Directory.Open: '_directory_open',
        Directory.Delete: '_directory_delete',
        Directory.Move: '_transfer',
        Directory.Copy: '_transfer',
        Directory.Rename: '_rename',
        Directory.Create: '_create',
        File.Open: '_file_open',
        File.Delete: '_entry_delete',
        File.Move: '_transfer',
        File.Copy: '_transfer',
        File.Rename: '_rename',
        File.Create: '_create',
        Symlink.Open: '_symlink_open',
        Symlink.Delete: '_entry_delete',
        Symlink.Rename: '_rename',
        Symlink.Create: '_create',
        Search.Start: '_search_start',
        Search.Stop: '_search_stop',
        Search.Input: '_search_input',
        Search.ApplySearch: '_search_apply',
        App.ShowModal: '_app_show_modal',
        App.CloseModal: '_app_close_modal',
        App.FocusPanel: '_app_focus_panel',
        App.ModalInput: '_app_modal_input',
        App.ModalCycle: '_app_modal_cycle',
        App.ChangeSort: '_app_change_sort',
        App.Quit: '_app_quit',
    }

    def __init__(self, filesystem, config=None, *, start_paths=(None, None), launcher=None):
        self._fs = filesystem
        self._launcher = launcher
        self._observers = []
        self._dispatching = False
        self.running = True
        config = config or AppConfig()
        left_path, right_path = (path or os.getcwd() for path in start_paths)
        self._config = config
        self._state = AppState(
            left_panel=PanelState(PanelSide.LEFT, (self._new_tab(left_path),)),
            right_panel=PanelState(PanelSide.RIGHT, (self._new_tab(right_path),)),
            config=config,
        )

    @property
    def state(self):
        """Current immutable snapshot."""
        return self._state

    @property
    def filesystem(self):
        return self._fs

    def subscribe(self, callback):
        """Register ``callback(state)``; returns a function that unregisters it."""
        self._observers.append(callback)

        def _unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return _unsubscribe

    def dispatch(self, action):
        """Apply one action. Returns True when it was recognised and applied."""
        if self._dispatching:
            raise ReentrantDispatchError(f'dispatch({action_name(action)}) while another action is running')

        method_name = self._DISPATCH.get(type(action))
        self._dispatching = True
        try:
            if method_name is None:
                LOGGER.warning('Unknown action received: %r', action)
                new_state = self._report(self._state, [
                    OperationFailure(ErrorKind.UNRESOLVABLE, '', f'Unsupported action {type(action).__name__}'),
                ])
                handled = False
            else:
                if LOGGER.isEnabledFor(logging.DEBUG):
                    LOGGER.debug('Dispatching %s', serialize_action(action))
                new_state, handled = getattr(self, method_name)(self._state, action)

            if new_state is not self._state:
                self._state = new_state
                for callback in list(self._observers):
                    callback(new_state)
            if not handled:
                LOGGER.debug('Action %s was not applied', action_name(action))
            return handled
        finally:
            self._dispatching = False

    # ------------------------------------------------------------------
    # Listing helpers
    # ------------------------------------------------------------------

    def _config_of(self, state):
        return state.config if state is not None else self._config

    def _list(self, path, state=None):
        config = self._config_of(state)
        items = self._fs.list_dir(path, config.sort_policy())
        if not config.show_hidden:
            items = [item for item in items if not item.is_hidden]
        return items

    def _existing_dir(self, path):
        """``path`` itself, or its closest ancestor that is still a directory."""
        current = os.path.normpath(os.path.abspath(path))
        while not self._fs.is_dir(current):
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return current

    def _new_tab(self, path, focus_path=None, state=None):
        path = self._existing_dir(path)
        return TabState.from_listing(path, self._list(path, state), focus_path=focus_path)

    def _reload_tab(self, state, tab):
        if not self._fs.is_dir(tab.path):
            LOGGER.debug('Tab path %s vanished, moving to nearest parent', tab.path)
            return self._new_tab(tab.path, state=state)
        return tab.with_listing(self._list(tab.path, state))

    def _reload_where(self, state, predicate):
        for side in PanelSide:
            panel = state.panel(side)
            tabs = tuple(
                self._reload_tab(state, tab) if predicate(side, tab) else tab
                for tab in panel.tabs
            )
            if any(new is not old for new, old in zip(tabs, panel.tabs)):
                state = state.with_panel(replace(panel, tabs=tabs))
        return state

    def _refresh_after(self, state, directories, removed=()):
        """Reload every tab showing one of ``directories`` or living under a removed path."""
        directories = {os.path.normpath(path) for path in directories}

        def _affected(_side, tab):
            path = os.path.normpath(tab.path)
            return path in directories or any(ops.is_within(path, gone) for gone in removed)

        return self._reload_where(state, _affected)

    def _focus(self, state, side, index, path):
        """Put the cursor of tab (side, index) on ``path`` when it is visible."""
        panel = state.panel(side)
        tab = panel.tab_at(index)
        if tab is None:
            return state
        for position, item in enumerate(tab.filtered_items()):
            if item.path == path:
                tab = replace(tab, cursor=position, selected=frozenset([path]))
                return state.with_panel(panel.with_tab(index, tab))
        return state

    def _report(self, state, failures):
        """Surface failures in a messagebox, appending to one already shown."""
        failures = [failure for failure in failures if failure is not None]
        if not failures:
            return state
        lines = [failure.describe() for failure in failures]
        if isinstance(state.modal, MessageboxModal):
            lines.insert(0, state.modal.text)
        return replace(state, modal=MessageboxModal('\n'.join(lines)))

    def _side(self, state, side):
        return PanelSide(side) if side is not None else state.focused_side

    def _replace_active(self, state, side, tab):
        panel = state.panel(side)
        return state.with_panel(panel.with_tab(panel.current_tab, tab))

    # ------------------------------------------------------------------
    # Tab actions
    # ------------------------------------------------------------------

    def _move_cursor(self, state, action, step, extend):
        side = self._side(state, action.side)
        tab = state.panel(side).active_tab()
        view = tab.filtered_items()
        if not view:
            return state, True

        tab = replace(tab, cursor=tab.clamp_cursor(tab.cursor))
        if tab.cursor is None:
            cursor = 0
            selected = {view[0].path}
            if extend:
                selected |= tab.selected
        elif extend and view[tab.cursor].path not in tab.selected:
            cursor = tab.cursor
            selected = tab.selected | {view[cursor].path}
        else:
            cursor = max(0, min(tab.cursor + step, len(view) - 1))
            selected = {view[cursor].path}
            if extend:
                selected |= tab.selected

        tab = replace(tab, cursor=cursor, selected=frozenset(selected))
        return self._replace_active(state, side, tab), True

    def _tab_next(self, state, action):
        return self._move_cursor(state, action, 1, extend=False)

    def _tab_previous(self, state, action):
        return self._move_cursor(state, action, -1, extend=False)

    def _tab_select_next(self, state, action):
        return self._move_cursor(state, action, 1, extend=True)

    def _tab_select_prev(self, state, action):
        return self._move_cursor(state, action, -1, extend=True)

    def _tab_clear_selection(self, state, action):
        side = self._side(state, action.side)
        tab = state.panel(side).active_tab()
        if not tab.selected:
            return state, True
        return self._replace_active(state, side, replace(tab, selected=frozenset())), True

    def _tab_reload(self, state, action):
        side = PanelSide(action.side)
        target = os.path.normpath(action.path)
        panel = state.panel(side)
        if not any(os.path.normpath(tab.path) == target for tab in panel.tabs):
            LOGGER.debug('ReloadTab for %s matched no tab on %s', action.path, side.value)
            return state, False
        return self._reload_where(
            state, lambda s, tab: s == side and os.path.normpath(tab.path) == target,
        ), True

    def _tab_switch(self, state, action):
        panel = state.panel(action.side)
        if panel.tab_at(action.tab) is None:
            return state, False
        state = state.with_panel(replace(panel, current_tab=action.tab))
        return replace(state, focused_side=PanelSide(action.side)), True

    def _tab_close(self, state, action):
        panel = state.panel(action.side)
        if panel.tab_at(action.tab) is None or len(panel.tabs) == 1:
            return state, False
        tabs = panel.tabs[:action.tab] + panel.tabs[action.tab + 1:]
        current = panel.current_tab
        if current > action.tab or current >= len(tabs):
            current -= 1
        return state.with_panel(replace(panel, tabs=tabs, current_tab=max(0, current))), True

    # ------------------------------------------------------------------
    # Open
    # ------------------------------------------------------------------

    def _directory_open(self, state, action):
        info = action.panel
        panel = state.panel(info.side)
        old_tab = panel.tab_at(info.tab)
        if old_tab is None:
            return state, False
        if not self._fs.is_dir(info.path):
            failure = OperationFailure(ErrorKind.NOT_FOUND, info.path, 'Not a directory')
            return self._report(state, [failure]), True

        path = os.path.normpath(info.path)
        focus = None
        if os.path.dirname(os.path.normpath(old_tab.path)) == path:
            focus = os.path.normpath(old_tab.path)
        tab = TabState.from_listing(path, self._list(path, state), focus_path=focus)

        if action.in_new_tab:
            panel = replace(panel, tabs=panel.tabs + (tab,), current_tab=len(panel.tabs))
        else:
            panel = replace(panel.with_tab(info.tab, tab), current_tab=info.tab)
        state = state.with_panel(panel)
        return replace(state, focused_side=PanelSide(info.side)), True

    def _launch(self, state, path):
        if self._launcher is None:
            failure = OperationFailure(ErrorKind.UNRESOLVABLE, path, 'No program to open')
        else:
            failure = self._launcher(path, state.config)
        return self._report(state, [failure])

    def _file_open(self, state, action):
        if state.tab_ref(action.panel.side, action.panel.tab) is None:
            return state, False
        return self._launch(state, action.panel.path), True

    def _symlink_open(self, state, action):
        if state.tab_ref(action.panel.side, action.panel.tab) is None:
            return state, False
        if self._fs.is_dir(action.panel.path):
            return self._directory_open(state, Directory.Open(action.panel, action.in_new_tab))
        return self._launch(state, action.panel.path), True

    # ------------------------------------------------------------------
    # Delete / move / copy / rename / create
    # ------------------------------------------------------------------

    def _directory_delete(self, state, action):
        info = action.panel
        if state.tab_ref(info.side, info.tab) is None:
            return state, False
        failure = ops.delete_directory(self._fs, info.path, action.is_empty)
        state = self._refresh_after(state, [os.path.dirname(os.path.normpath(info.path))], removed=[info.path])
        return self._report(state, [failure]), True

    def _entry_delete(self, state, action):
        info = action.panel
        if state.tab_ref(info.side, info.tab) is None:
            return state, False
        failure = ops.delete_entry(self._fs, info.path)
        state = self._refresh_after(state, [os.path.dirname(os.path.normpath(info.path))])
        return self._report(state, [failure]), True

    def _transfer(self, state, action):
        source, target = action.source, action.target
        if state.tab_ref(source.side, source.tab) is None or state.tab_ref(target.side, target.tab) is None:
            return state, False

        is_dir = isinstance(action, (Directory.Move, Directory.Copy))
        if isinstance(action, (Directory.Move, File.Move)):
            failure = ops.move_item(self._fs, source.path, target.path, is_dir=is_dir)
            removed = [source.path] if failure is None else []
        else:
            failure = ops.copy_item(self._fs, source.path, target.path, is_dir=is_dir)
            removed = []

        directories = [os.path.dirname(os.path.normpath(source.path)), os.path.dirname(os.path.normpath(target.path))]
        state = self._refresh_after(state, directories, removed=removed)
        return self._report(state, [failure]), True

    def _rename(self, state, action):
        source, target = action.source, action.target
        if state.tab_ref(source.side, source.tab) is None:
            return state, False
        failure = ops.rename_item(self._fs, source.path, target.path)
        state = self._refresh_after(state, [os.path.dirname(os.path.normpath(source.path))])
        if failure is None:
            state = self._focus(state, source.side, source.tab, os.path.normpath(target.path))
        return self._report(state, [failure]), True

    def _create(self, state, action):
        info = action.panel
        if state.tab_ref(info.side, info.tab) is None:
            return state, False
        if isinstance(action, Directory.Create):
            failure = ops.create_item(self._fs, 'Directory', info.path)
        elif isinstance(action, Symlink.Create):
            failure = ops.create_item(self._fs, 'Symlink', info.path, target=action.target)
        else:
            failure = ops.create_item(self._fs, 'File', info.path)
        state = self._refresh_after(state, [os.path.dirname(os.path.normpath(info.path))])
        if failure is None:
            state = self._focus(state, info.side, info.tab, os.path.normpath(info.path))
        return self._report(state, [failure]), True

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _search_target(self, state, action):
        panel = state.panel(action.side)
        return panel, panel.tab_at(action.tab)

    def _search_start(self, state, action):
        panel, tab = self._search_target(state, action)
        if tab is None or tab.search_mode:
            return state, False
        current = tab.current_item()
        tab = replace(tab, search_mode=True, phrase='')
        cursor = tab.items.index(current) if current is not None else tab.cursor
        tab = replace(tab, cursor=tab.clamp_cursor(cursor))
        return state.with_panel(panel.with_tab(action.tab, tab)), True

    def _search_stop(self, state, action):
        panel, tab = self._search_target(state, action)
        if tab is None or not (tab.search_mode or tab.phrase):
            return state, False
        current = tab.current_item()
        tab = replace(tab, search_mode=False, phrase='')
        cursor = tab.cursor
        if current is not None:
            cursor = tab.items.index(current)
        tab = replace(tab, cursor=tab.clamp_cursor(cursor))
        return state.with_panel(panel.with_tab(action.tab, tab)), True

    def _search_input(self, state, action):
        panel, tab = self._search_target(state, action)
        if tab is None or not tab.search_mode:
            return state, False
        current = tab.current_item()
        tab = replace(tab, phrase=action.phrase)
        view = tab.filtered_items()
        cursor = 0
        if current is not None and current in view:
            cursor = view.index(current)
        tab = replace(tab, cursor=tab.clamp_cursor(cursor))
        return state.with_panel(panel.with_tab(action.tab, tab)), True

    def _search_apply(self, state, action):
        panel, tab = self._search_target(state, action)
        if tab is None or not tab.search_mode or not tab.phrase:
            return state, False
        tab = replace(tab, search_mode=False)
        return state.with_panel(panel.with_tab(action.tab, tab)), True

    # ------------------------------------------------------------------
    # App
    # ------------------------------------------------------------------

    def _app_show_modal(self, state, action):
        modal = action.modal
        if modal is None:
            return replace(state, modal=None), True
        if not isinstance(modal, MODAL_TYPES):
            LOGGER.warning('Ignoring unknown modal %r', modal)
            return state, False
        if isinstance(modal, MessageboxModal) and isinstance(state.modal, MessageboxModal):
            modal = MessageboxModal(f'{state.modal.text}\n{modal.text}')
        return replace(state, modal=modal), True

    def _app_close_modal(self, state, action):
        if state.modal is None:
            return state, False
        return replace(state, modal=None), True

    def _app_focus_panel(self, state, action):
        return replace(state, focused_side=PanelSide(action.side)), True

    def _app_modal_input(self, state, action):
        if not isinstance(state.modal, (RenameModal, CreateModal)):
            return state, False
        return replace(state, modal=replace(state.modal, value=action.value)), True

    def _app_modal_cycle(self, state, action):
        if not isinstance(state.modal, CreateModal):
            return state, False
        modal = state.modal
        return replace(state, modal=replace(modal, index=(modal.index + 1) % len(CREATE_KINDS))), True

    def _app_change_sort(self, state, action):
        config = state.config.with_sort_policy(state.config.sort_policy().with_axis(action.axis, action.order))
        state = replace(state, config=config)
        return self._reload_where(state, lambda _side, _tab: True), True

    def _app_quit(self, state, action):
        self.running = False
        return state, True
