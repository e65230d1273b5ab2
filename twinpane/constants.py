"""Constants for the twinpane terminal surface."""

import curses

from .filesystem.items import ItemKind

# Box drawing characters (Unicode).
BOX_TL = "╔"
BOX_TR = "╗"
BOX_BL = "╚"
BOX_BR = "╝"
BOX_H = "═"
BOX_V = "║"

# Single-line box characters.
SB_TL = "┌"
SB_TR = "┐"
SB_BL = "└"
SB_BR = "┘"
SB_H = "─"
SB_V = "│"

# Listing icons, shown when show_icons is enabled.
ITEM_ICONS = {
    ItemKind.DIRECTORY: "▸ ",
    ItemKind.SYMLINK: "↪ ",
    ItemKind.FILE: "· ",
    ItemKind.UNKNOWN: "? ",
}
ITEM_ICONS_ASCII = {
    ItemKind.DIRECTORY: "+ ",
    ItemKind.SYMLINK: "~ ",
    ItemKind.FILE: "  ",
    ItemKind.UNKNOWN: "? ",
}

# Color pair IDs.
C_PANEL = 1
C_PANEL_BORDER = 2
C_TAB = 3
C_TAB_ACTIVE = 4
C_CURSOR = 5
C_SELECTED = 6
C_DIRECTORY = 7
C_SYMLINK = 8
C_STATUS = 9
C_DIALOG = 10
C_SEARCH = 11

# Test doubles may expose only a subset of color constants.
for _name, _fallback in {
    "COLOR_BLACK": 0,
    "COLOR_BLUE": 4,
    "COLOR_CYAN": 6,
    "COLOR_GREEN": 2,
    "COLOR_WHITE": 7,
    "COLOR_YELLOW": 3,
}.items():
    if not hasattr(curses, _name):
        setattr(curses, _name, _fallback)

COLOR_PAIRS = {
    C_PANEL: (curses.COLOR_WHITE, curses.COLOR_BLUE),
    C_PANEL_BORDER: (curses.COLOR_CYAN, curses.COLOR_BLUE),
    C_TAB: (curses.COLOR_BLACK, curses.COLOR_CYAN),
    C_TAB_ACTIVE: (curses.COLOR_BLACK, curses.COLOR_WHITE),
    C_CURSOR: (curses.COLOR_BLACK, curses.COLOR_CYAN),
    C_SELECTED: (curses.COLOR_YELLOW, curses.COLOR_BLUE),
    C_DIRECTORY: (curses.COLOR_WHITE, curses.COLOR_BLUE),
    C_SYMLINK: (curses.COLOR_CYAN, curses.COLOR_BLUE),
    C_STATUS: (curses.COLOR_BLACK, curses.COLOR_CYAN),
    C_DIALOG: (curses.COLOR_BLACK, curses.COLOR_WHITE),
    C_SEARCH: (curses.COLOR_BLACK, curses.COLOR_YELLOW),
}

# Key codes that never arrive as printable characters.
KEY_ENTER_CODES = (10, 13, getattr(curses, "KEY_ENTER", 343))
KEY_BACKSPACE_CODES = (8, 127, getattr(curses, "KEY_BACKSPACE", 263))
KEY_ESCAPE = 27
KEY_TAB = 9


def _keys(*values):
    return tuple(ord(value) if isinstance(value, str) else value for value in values)


_KEY_BINDINGS = {
    "next": _keys(getattr(curses, "KEY_DOWN", 258), "j"),
    "previous": _keys(getattr(curses, "KEY_UP", 259), "k"),
    "select_next": _keys(getattr(curses, "KEY_SF", 336), "J", " "),
    "select_prev": _keys(getattr(curses, "KEY_SR", 337), "K"),
    "open": _keys(*KEY_ENTER_CODES, getattr(curses, "KEY_RIGHT", 261), "l"),
    "open_new_tab": _keys("t"),
    "up": _keys(getattr(curses, "KEY_LEFT", 260), *KEY_BACKSPACE_CODES, "h"),
    "switch_panel": _keys(KEY_TAB),
    "next_tab": _keys("]"),
    "prev_tab": _keys("["),
    "close_tab": _keys("w"),
    "clear_selection": _keys(KEY_ESCAPE),
    "delete": _keys(getattr(curses, "KEY_DC", 330), "d"),
    "copy": _keys(getattr(curses, "KEY_F5", 269), "c"),
    "move": _keys(getattr(curses, "KEY_F6", 270), "m"),
    "rename": _keys(getattr(curses, "KEY_F2", 266), "r"),
    "create": _keys(getattr(curses, "KEY_F7", 271), "n"),
    "properties": _keys("i"),
    "search": _keys("/"),
    "sort_name": _keys("N"),
    "sort_date": _keys("D"),
    "sort_attr": _keys("Z"),
    "quit": _keys("q", 17),
}
_KEY_BINDINGS.update({f"jump:command_{slot}": _keys(str(slot)) for slot in range(1, 10)})

# Key code -> command name.
DEFAULT_KEYMAP = {code: command for command, codes in _KEY_BINDINGS.items() for code in codes}

# Names accepted in the [keyboard_cfg] config table.
KEY_NAMES = {
    "backspace": KEY_BACKSPACE_CODES,
    "enter": KEY_ENTER_CODES,
    "left": _keys(getattr(curses, "KEY_LEFT", 260)),
    "right": _keys(getattr(curses, "KEY_RIGHT", 261)),
    "up": _keys(getattr(curses, "KEY_UP", 259)),
    "down": _keys(getattr(curses, "KEY_DOWN", 258)),
    "home": _keys(getattr(curses, "KEY_HOME", 262)),
    "end": _keys(getattr(curses, "KEY_END", 360)),
    "page_up": _keys(getattr(curses, "KEY_PPAGE", 339)),
    "page_down": _keys(getattr(curses, "KEY_NPAGE", 338)),
    "tab": _keys(KEY_TAB),
    "back_tab": _keys(getattr(curses, "KEY_BTAB", 353)),
    "delete": _keys(getattr(curses, "KEY_DC", 330)),
    "insert": _keys(getattr(curses, "KEY_IC", 331)),
    "esc": _keys(KEY_ESCAPE),
    "space": _keys(" "),
}
KEY_NAMES.update({f"f{n}": _keys(getattr(curses, "KEY_F0", 264) + n) for n in range(1, 13)})

# Layout constants
STATUS_BAR_HEIGHT = 1        # Bottom row
PANEL_MIN_WIDTH = 20         # Below this a panel only shows names
MODAL_WIDTH = 56             # Preferred modal width
