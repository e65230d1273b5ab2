"""
Application state tree owned by the store.

Every class here is a frozen dataclass: transitions build new instances with
``dataclasses.replace`` and the store swaps the root in one assignment, so a
snapshot handed to the renderer never changes underneath it.
"""
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from ..filesystem.items import FileSystemItem
from .config import AppConfig


class PanelSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self):
        return PanelSide.RIGHT if self == PanelSide.LEFT else PanelSide.LEFT


@dataclass(frozen=True)
class PanelInfo:
    """Cross-reference to one tab: the path acted on, the tab index and side."""

    path: str
    tab: int
    side: PanelSide


def tab_title(path):
    return os.path.basename(os.path.normpath(path)) or os.sep


def matches_phrase(item, phrase):
    return phrase.casefold() in item.name.casefold()


@dataclass(frozen=True)
class TabState:
    """One directory view."""

    path: str
    name: str = ''
    items: Tuple[FileSystemItem, ...] = ()
    selected: frozenset = frozenset()
    cursor: Optional[int] = None
    search_mode: bool = False
    phrase: str = ''

    @classmethod
    def from_listing(cls, path, items, focus_path=None):
        """Fresh tab on ``path``; the cursor starts on ``focus_path`` when listed."""
        items = tuple(items)
        cursor = 0 if items else None
        if focus_path is not None:
            for index, item in enumerate(items):
                if item.path == focus_path:
                    cursor = index
                    break
        selected = frozenset([items[cursor].path]) if cursor is not None else frozenset()
        return cls(path=path, name=tab_title(path), items=items, selected=selected, cursor=cursor)

    @property
    def is_filtering(self):
        return bool(self.phrase)

    def filtered_items(self):
        if not self.phrase:
            return self.items
        return tuple(item for item in self.items if matches_phrase(item, self.phrase))

    def current_item(self):
        view = self.filtered_items()
        if self.cursor is None or not 0 <= self.cursor < len(view):
            return None
        return view[self.cursor]

    def selected_items(self):
        """Selected items in listing order."""
        return [item for item in self.items if item.path in self.selected]

    def targets(self):
        """Items a batch operation acts on: the selection, else the cursor item."""
        chosen = self.selected_items()
        if chosen:
            return chosen
        current = self.current_item()
        return [current] if current is not None else []

    def clamp_cursor(self, cursor):
        size = len(self.filtered_items())
        if size == 0:
            return None
        if cursor is None:
            return 0
        return max(0, min(cursor, size - 1))

    def with_listing(self, items):
        """Replace the listing, keeping the selection that still exists."""
        items = tuple(items)
        current = self.current_item()
        paths = {item.path for item in items}
        rebuilt = replace(
            self,
            items=items,
            selected=frozenset(path for path in self.selected if path in paths),
        )
        cursor = self.cursor
        if current is not None:
            view = rebuilt.filtered_items()
            for index, item in enumerate(view):
                if item.path == current.path:
                    cursor = index
                    break
        return replace(rebuilt, cursor=rebuilt.clamp_cursor(cursor))


@dataclass(frozen=True)
class PanelState:
    side: PanelSide
    tabs: Tuple[TabState, ...]
    current_tab: int = 0

    def active_tab(self):
        return self.tabs[self.current_tab]

    def tab_at(self, index):
        if isinstance(index, int) and 0 <= index < len(self.tabs):
            return self.tabs[index]
        return None

    def with_tab(self, index, tab):
        tabs = list(self.tabs)
        tabs[index] = tab
        return replace(self, tabs=tuple(tabs))


@dataclass(frozen=True)
class MessageboxModal:
    text: str


@dataclass(frozen=True)
class RenameModal:
    side: PanelSide
    tab: int
    item: FileSystemItem
    value: str = ''


CREATE_KINDS = ('File', 'Directory', 'Symlink')


@dataclass(frozen=True)
class CreateModal:
    """``index`` picks the kind from CREATE_KINDS; ``path`` is the tab directory."""

    index: int
    side: PanelSide
    tab: int
    path: str
    value: str = ''
    target: Optional[str] = None

    @property
    def kind(self):
        return CREATE_KINDS[self.index % len(CREATE_KINDS)]


@dataclass(frozen=True)
class PropertiesModal:
    item: FileSystemItem


MODAL_TYPES = (MessageboxModal, RenameModal, CreateModal, PropertiesModal)


@dataclass(frozen=True)
class AppState:
    left_panel: PanelState
    right_panel: PanelState
    focused_side: PanelSide = PanelSide.LEFT
    modal: Optional[object] = None
    config: AppConfig = field(default_factory=AppConfig)

    def panel(self, side):
        return self.left_panel if PanelSide(side) == PanelSide.LEFT else self.right_panel

    def focused_panel(self):
        return self.panel(self.focused_side)

    def with_panel(self, panel):
        if panel.side == PanelSide.LEFT:
            return replace(self, left_panel=panel)
        return replace(self, right_panel=panel)

    def tab_ref(self, side, index):
        """Return the tab at (side, index), or None when the index is stale."""
        return self.panel(side).tab_at(index)
