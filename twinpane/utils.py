"""
Utility functions for twinpane's curses surface.
"""
import curses
import locale
import unicodedata

from .constants import (
    BOX_BL, BOX_BR, BOX_H, BOX_TL, BOX_TR, BOX_V, COLOR_PAIRS,
    SB_BL, SB_BR, SB_H, SB_TL, SB_TR, SB_V,
)


def init_colors():
    """Initialize curses color pairs; terminals without color keep defaults."""
    try:
        curses.start_color()
        curses.use_default_colors()
    except curses.error:
        return
    for pair_id, (fg, bg) in COLOR_PAIRS.items():
        try:
            curses.init_pair(pair_id, fg, bg)
        except curses.error:
            return


def color(pair_id):
    """Return the curses attribute for a color pair ID."""
    try:
        return curses.color_pair(pair_id)
    except curses.error:
        return 0


def safe_addstr(win, y, x, text, attr=0):
    """Write string safely, clipping to window bounds."""
    h, w = win.getmaxyx()
    if y < 0 or y >= h or x >= w:
        return
    max_len = w - x - 1
    if max_len <= 0:
        return
    try:
        win.addnstr(y, x, text, max_len, attr)
    except curses.error:
        pass


def normalize_key_code(key):
    """Normalize keys from get_wch()/getch() into comparable integer codes."""
    if isinstance(key, int):
        return key
    if not isinstance(key, str) or not key or len(key) != 1:
        return None
    if key in ('\n', '\r'):
        return 10
    if key == '\x1b':
        return 27
    if key == '\t':
        return 9
    if key == '\x7f':
        return 127
    if key == '\b':
        return 8
    return ord(key)


def key_char(key):
    """Return the printable character typed, or None for control/special keys."""
    if isinstance(key, int):
        if 32 <= key < 127:
            return chr(key)
        return None
    if isinstance(key, str) and len(key) == 1 and key.isprintable():
        return key
    return None


def cell_width(text):
    """Terminal cells used by ``text`` (wide East Asian characters count twice)."""
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ('W', 'F') else 1
    return width


def fit_text(text, width):
    """Clip or pad ``text`` to exactly ``width`` cells, marking clipped text with '~'."""
    if width <= 0:
        return ''
    if cell_width(text) <= width:
        return text + ' ' * (width - cell_width(text))
    out = []
    used = 0
    for char in text:
        char_width = cell_width(char)
        if used + char_width > width - 1:
            break
        out.append(char)
        used += char_width
    return ''.join(out) + '~' + ' ' * (width - used - 1)


def check_unicode_support():
    """Check if terminal supports Unicode."""
    try:
        '╔'.encode(locale.getpreferredencoding())
        return True
    except (UnicodeEncodeError, LookupError):
        return False


def draw_box(win, y, x, h, w, attr=0, double=True, unicode=True):
    """Draw a box with double or single line borders."""
    if not unicode:
        tl = tr = bl = br = '+'
        hz, vt = '-', '|'
    elif double:
        tl, tr, bl, br, hz, vt = BOX_TL, BOX_TR, BOX_BL, BOX_BR, BOX_H, BOX_V
    else:
        tl, tr, bl, br, hz, vt = SB_TL, SB_TR, SB_BL, SB_BR, SB_H, SB_V

    safe_addstr(win, y, x, tl + hz * (w - 2) + tr, attr)
    for i in range(1, h - 1):
        safe_addstr(win, y + i, x, vt, attr)
        safe_addstr(win, y + i, x + w - 1, vt, attr)
    safe_addstr(win, y + h - 1, x, bl + hz * (w - 2) + br, attr)
