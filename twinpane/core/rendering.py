"""Rendering helpers for twinpane. Everything here reads a state snapshot only."""

import curses

from ..constants import (
    C_CURSOR,
    C_DIALOG,
    C_DIRECTORY,
    C_PANEL,
    C_PANEL_BORDER,
    C_SEARCH,
    C_SELECTED,
    C_STATUS,
    C_SYMLINK,
    C_TAB,
    C_TAB_ACTIVE,
    ITEM_ICONS,
    ITEM_ICONS_ASCII,
    MODAL_WIDTH,
    PANEL_MIN_WIDTH,
    STATUS_BAR_HEIGHT,
)
from ..filesystem.items import describe_item, format_size
from ..filesystem.sorting import SortOrder
from ..utils import color, draw_box, fit_text, safe_addstr
from .state import CreateModal, MessageboxModal, PanelSide, PropertiesModal, RenameModal

_ORDER_MARKS = {SortOrder.ASC: "+", SortOrder.DESC: "-", SortOrder.NONE: ""}


def scroll_offset(cursor, rows):
    """First visible row so that ``cursor`` stays on screen."""
    if cursor is None or rows <= 0:
        return 0
    return max(0, cursor - rows + 1)


def item_label(item, config, unicode=True, width=0):
    """One listing line: arrow slot, optional icon, name and a right aligned size."""
    icons = ITEM_ICONS if unicode else ITEM_ICONS_ASCII
    prefix = icons[item.kind] if config.show_icons else ""
    size = "" if item.is_dir else format_size(item.size)
    if width < PANEL_MIN_WIDTH:
        size = ""
    name_width = max(0, width - len(size) - (1 if size else 0))
    return fit_text(prefix + item.display_name, name_width) + (" " + size if size else "")


def _item_attr(item, is_cursor, is_selected, focused):
    if is_cursor and focused:
        return color(C_CURSOR) | curses.A_BOLD
    if is_selected:
        return color(C_SELECTED) | curses.A_BOLD
    if item.is_dir:
        return color(C_DIRECTORY) | curses.A_BOLD
    if item.is_symlink:
        return color(C_SYMLINK)
    return color(C_PANEL)


def draw_tab_strip(stdscr, panel, y, x, w):
    """Tab titles along the top border of a panel."""
    col = x + 1
    for index, tab in enumerate(panel.tabs):
        label = f" {tab.name} "
        if col + len(label) >= x + w - 1:
            break
        attr = color(C_TAB_ACTIVE) | curses.A_BOLD if index == panel.current_tab else color(C_TAB)
        safe_addstr(stdscr, y, col, label, attr)
        col += len(label) + 1


def draw_listing(stdscr, tab, y, x, h, w, *, focused, config, unicode=True):
    view = tab.filtered_items()
    arrow = config.list_arrow
    offset = scroll_offset(tab.cursor, h)
    for row in range(h):
        index = offset + row
        line_y = y + row
        safe_addstr(stdscr, line_y, x, " " * w, color(C_PANEL))
        if index >= len(view):
            continue
        item = view[index]
        is_cursor = index == tab.cursor
        marker = arrow if is_cursor else " " * len(arrow)
        label = item_label(item, config, unicode, w - len(marker))
        attr = _item_attr(item, is_cursor, item.path in tab.selected, focused)
        safe_addstr(stdscr, line_y, x, marker + label, attr)

    if not view:
        message = "(no matches)" if tab.is_filtering else "(empty)"
        safe_addstr(stdscr, y, x + 1, message, color(C_PANEL) | curses.A_DIM)


def draw_search_bar(stdscr, tab, y, x, w):
    if not (tab.search_mode or tab.phrase):
        return
    caret = "_" if tab.search_mode else ""
    safe_addstr(stdscr, y, x, fit_text(f"/{tab.phrase}{caret}", w), color(C_SEARCH))


def draw_panel(stdscr, state, side, y, x, h, w, unicode=True):
    """Box, tab strip, listing and search bar of one panel."""
    panel = state.panel(side)
    tab = panel.active_tab()
    focused = state.focused_side == PanelSide(side)
    border = color(C_PANEL_BORDER) | (curses.A_BOLD if focused else 0)
    draw_box(stdscr, y, x, h, w, border, double=focused, unicode=unicode)
    draw_tab_strip(stdscr, panel, y, x, w)

    inner_h = h - 2
    searching = tab.search_mode or bool(tab.phrase)
    if searching:
        inner_h -= 1
    draw_listing(
        stdscr, tab, y + 1, x + 1, inner_h, w - 2,
        focused=focused, config=state.config, unicode=unicode,
    )
    if searching:
        draw_search_bar(stdscr, tab, y + h - 2, x + 1, w - 2)
    safe_addstr(stdscr, y + h - 1, x + 2, fit_text(f" {tab.path} ", min(len(tab.path) + 2, w - 4)), border)


def _sort_summary(config):
    policy = config.sort_policy()
    parts = []
    for label, order in (("name", policy.by_name), ("size", policy.by_attr), ("date", policy.by_date)):
        if order != SortOrder.NONE:
            parts.append(f"{label}{_ORDER_MARKS[order]}")
    if policy.directories_first:
        parts.insert(0, "dirs")
    return ",".join(parts) or "unsorted"


def draw_statusbar(stdscr, state, version):
    """Draw the bottom status bar."""
    h, w = stdscr.getmaxyx()
    attr = color(C_STATUS)
    tab = state.focused_panel().active_tab()
    current = tab.current_item()
    count = len(tab.filtered_items())
    left = f" twinpane v{version} | {len(tab.selected)}/{count} selected | sort: {_sort_summary(state.config)}"
    safe_addstr(stdscr, h - 1, 0, " " * (w - 1), attr)
    safe_addstr(stdscr, h - 1, 0, left, attr)
    if current is not None:
        right = f" {current.name} "
        if w > len(left) + len(right) + 1:
            safe_addstr(stdscr, h - 1, w - len(right) - 1, right, attr | curses.A_BOLD)


def modal_lines(modal):
    """Title and body lines for a modal."""
    if isinstance(modal, MessageboxModal):
        return "Message", modal.text.splitlines() or [""]
    if isinstance(modal, PropertiesModal):
        return "Properties", describe_item(modal.item)
    if isinstance(modal, RenameModal):
        return f"Rename {modal.item.name}", ["New name:", f"{modal.value}_"]
    if isinstance(modal, CreateModal):
        lines = [f"Create {modal.kind} in {modal.path}", f"{modal.value}_"]
        if modal.kind == "Symlink":
            lines.append(f"Target: {modal.target or '-'}")
        lines.append("Tab: change kind  Enter: create  Esc: cancel")
        return "Create", lines
    return "", []


def draw_modal(stdscr, modal, unicode=True):
    """Draw the active modal centered on screen."""
    if modal is None:
        return
    title, lines = modal_lines(modal)
    h, w = stdscr.getmaxyx()
    box_w = min(w - 2, max(MODAL_WIDTH, len(title) + 6))
    box_h = min(h - 2, len(lines) + 4)
    y = max(0, (h - box_h) // 2)
    x = max(0, (w - box_w) // 2)
    attr = color(C_DIALOG)
    for row in range(box_h):
        safe_addstr(stdscr, y + row, x, " " * box_w, attr)
    draw_box(stdscr, y, x, box_h, box_w, attr, double=True, unicode=unicode)
    safe_addstr(stdscr, y, x + 2, f" {title} ", attr | curses.A_BOLD)
    for row, line in enumerate(lines[: box_h - 4]):
        safe_addstr(stdscr, y + 2 + row, x + 2, fit_text(line, box_w - 4), attr)


def draw_frame(stdscr, state, version, unicode=True):
    """Render both panels, the status bar and the modal."""
    stdscr.erase()
    h, w = stdscr.getmaxyx()
    panel_h = h - STATUS_BAR_HEIGHT
    left_w = w // 2
    draw_panel(stdscr, state, PanelSide.LEFT, 0, 0, panel_h, left_w, unicode)
    draw_panel(stdscr, state, PanelSide.RIGHT, 0, left_w, panel_h, w - left_w, unicode)
    draw_statusbar(stdscr, state, version)
    draw_modal(stdscr, state.modal, unicode)
    stdscr.noutrefresh()
    curses.doupdate()
