"""Keyboard routing for twinpane.

Keys are resolved in three layers: an open modal captures everything, then a
tab in search mode captures text input, then the keymap picks a command.
Each layer returns the list of actions to dispatch in order.
"""

import logging

from ..constants import DEFAULT_KEYMAP, KEY_BACKSPACE_CODES, KEY_ENTER_CODES, KEY_ESCAPE, KEY_NAMES, KEY_TAB
from ..filesystem.sorting import SortAxis
from ..utils import key_char, normalize_key_code
from . import intents
from .actions import App, Tab
from .state import CreateModal, RenameModal

LOGGER = logging.getLogger(__name__)


def _jump(command):
    return lambda state: intents.jump_to_hotkey(state, None, command)


COMMANDS = {
    "next": lambda state: [Tab.Next()],
    "previous": lambda state: [Tab.Previous()],
    "select_next": lambda state: [Tab.SelectNext()],
    "select_prev": lambda state: [Tab.SelectPrev()],
    "clear_selection": lambda state: [Tab.ClearSelection()],
    "open": intents.open_selection,
    "open_new_tab": intents.open_in_new_tab,
    "up": intents.navigate_up,
    "switch_panel": intents.switch_panel,
    "next_tab": lambda state: intents.cycle_tab(state, step=1),
    "prev_tab": lambda state: intents.cycle_tab(state, step=-1),
    "close_tab": intents.close_tab,
    "delete": intents.delete_selection,
    "copy": lambda state: intents.transfer_selection(state, move=False),
    "move": lambda state: intents.transfer_selection(state, move=True),
    "rename": intents.begin_rename,
    "create": intents.begin_create,
    "properties": intents.show_properties,
    "search": intents.start_search,
    "sort_name": lambda state: intents.cycle_sort(state, SortAxis.NAME),
    "sort_date": lambda state: intents.cycle_sort(state, SortAxis.DATE),
    "sort_attr": lambda state: intents.cycle_sort(state, SortAxis.ATTR),
    "quit": lambda state: [App.Quit()],
}
COMMANDS.update({
    command: _jump(command.split(":", 1)[1])
    for command in set(DEFAULT_KEYMAP.values())
    if command.startswith("jump:")
})

# Alternate names accepted in the [keyboard_cfg] table.
COMMAND_ALIASES = {
    "move_down": "next",
    "move_up": "previous",
    "open_as_tab": "open_new_tab",
    "navigate_up": "up",
    "close": "close_tab",
    "change_focus_panels": "switch_panel",
    "move_fs_item": "move",
    "copy_fs_item": "copy",
    "search_in_panel": "search",
    "filesystem_item_props": "properties",
}
COMMAND_ALIASES.update({f"command_{slot}": f"jump:command_{slot}" for slot in range(1, 10)})


def key_codes(key, modifier=""):
    """Curses key codes for a config binding, empty when curses cannot report it."""
    if len(key) > 1:
        codes = KEY_NAMES.get(key.lower(), ())
        return codes if not modifier else ()
    if modifier == "c" and key.isalpha():
        return (ord(key.lower()) & 0x1F,)
    if modifier == "s":
        return (ord(key.upper()),)
    if modifier:
        return ()
    return (ord(key),)


def build_keymap(bindings, base=None):
    """Merge ``{command: ((key, modifier), ...)}`` over ``base`` (the default keymap).

    A rebound command loses its default keys; a key claimed by a binding is
    taken from whatever command held it.
    """
    keymap = dict(DEFAULT_KEYMAP if base is None else base)
    for name, specs in bindings.items():
        command = COMMAND_ALIASES.get(name, name)
        if command not in COMMANDS:
            LOGGER.warning("Unknown command in key bindings: %s", name)
            continue
        codes = [code for key, modifier in specs for code in key_codes(key, modifier)]
        if not codes:
            LOGGER.warning("No usable key for %s: %r", name, specs)
            continue
        keymap = {code: bound for code, bound in keymap.items() if bound != command}
        keymap.update({code: command for code in codes})
    return keymap


def route_modal_key(state, key):
    """Actions for a key pressed while a modal is open."""
    modal = state.modal
    key_code = normalize_key_code(key)

    if not isinstance(modal, (RenameModal, CreateModal)):
        return [App.CloseModal()]
    if key_code in KEY_ENTER_CODES:
        return intents.confirm_modal(state)
    if key_code == KEY_ESCAPE:
        return [App.CloseModal()]
    if key_code in KEY_BACKSPACE_CODES:
        return [App.ModalInput(modal.value[:-1])]
    if key_code == KEY_TAB and isinstance(modal, CreateModal):
        return [App.ModalCycle()]
    char = key_char(key)
    if char is not None:
        return [App.ModalInput(modal.value + char)]
    return []


def route_search_key(state, key):
    """Actions for a key typed into the search bar, or None to fall through."""
    tab = state.focused_panel().active_tab()
    key_code = normalize_key_code(key)

    if not tab.search_mode:
        if tab.phrase and key_code == KEY_ESCAPE:
            return intents.stop_search(state)
        return None
    if key_code in KEY_ENTER_CODES:
        if not tab.phrase:
            return intents.stop_search(state)
        return intents.apply_search(state)
    if key_code == KEY_ESCAPE:
        return intents.stop_search(state)
    if key_code in KEY_BACKSPACE_CODES:
        return intents.search_input(state, tab.phrase[:-1])
    char = key_char(key)
    if char is not None:
        return intents.search_input(state, tab.phrase + char)
    return None


def route_key(state, key, keymap=None):
    """Resolve one key press into the actions to dispatch."""
    if state.modal is not None:
        return route_modal_key(state, key)

    actions = route_search_key(state, key)
    if actions is not None:
        return actions

    command = (keymap or DEFAULT_KEYMAP).get(normalize_key_code(key))
    if command is None:
        return []
    handler = COMMANDS.get(command)
    if handler is None:
        LOGGER.debug("No handler for command %s", command)
        return []
    return handler(state)


def handle_key_event(store, key, keymap=None):
    """Dispatch every action a key produces; returns how many were applied."""
    applied = 0
    for action in route_key(store.state, key, keymap):
        if store.dispatch(action):
            applied += 1
    return applied
