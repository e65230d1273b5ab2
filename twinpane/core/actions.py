"""
Typed action contract consumed by the twinpane store.

Actions are grouped by the domain they target (``Tab.Next``,
``Directory.Move``, ``Search.Input``...). Each one is a frozen dataclass that
carries everything needed to apply it, so the store never has to look back at
which key produced it.
"""
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Optional

from ..filesystem.items import FileSystemItem, ItemKind
from ..filesystem.sorting import SortAxis, SortOrder
from .state import (
    CreateModal,
    MessageboxModal,
    PanelInfo,
    PanelSide,
    PropertiesModal,
    RenameModal,
)


class ActionDomain(str, Enum):
    TAB = "tab"
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    SEARCH = "search"
    APP = "app"


class Action:
    """Base class for every dispatchable intent."""

    domain: ClassVar[ActionDomain]


class TabAction(Action):
    domain = ActionDomain.TAB


class DirectoryAction(Action):
    domain = ActionDomain.DIRECTORY


class FileAction(Action):
    domain = ActionDomain.FILE


class SymlinkAction(Action):
    domain = ActionDomain.SYMLINK


class SearchAction(Action):
    domain = ActionDomain.SEARCH


class AppAction(Action):
    domain = ActionDomain.APP


class Tab:
    """Cursor, selection and tab lifecycle. ``side=None`` targets the focused panel."""

    @dataclass(frozen=True)
    class Next(TabAction):
        side: Optional[PanelSide] = None

    @dataclass(frozen=True)
    class Previous(TabAction):
        side: Optional[PanelSide] = None

    @dataclass(frozen=True)
    class SelectNext(TabAction):
        side: Optional[PanelSide] = None

    @dataclass(frozen=True)
    class SelectPrev(TabAction):
        side: Optional[PanelSide] = None

    @dataclass(frozen=True)
    class ClearSelection(TabAction):
        side: Optional[PanelSide] = None

    @dataclass(frozen=True)
    class ReloadTab(TabAction):
        side: PanelSide
        path: str

    @dataclass(frozen=True)
    class SwitchTab(TabAction):
        side: PanelSide
        tab: int

    @dataclass(frozen=True)
    class CloseTab(TabAction):
        side: PanelSide
        tab: int


class Directory:
    @dataclass(frozen=True)
    class Open(DirectoryAction):
        panel: PanelInfo
        in_new_tab: bool = False

    @dataclass(frozen=True)
    class Delete(DirectoryAction):
        panel: PanelInfo
        is_empty: bool = False

    @dataclass(frozen=True)
    class Move(DirectoryAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Copy(DirectoryAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Rename(DirectoryAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Create(DirectoryAction):
        panel: PanelInfo


class File:
    @dataclass(frozen=True)
    class Open(FileAction):
        panel: PanelInfo

    @dataclass(frozen=True)
    class Delete(FileAction):
        panel: PanelInfo

    @dataclass(frozen=True)
    class Move(FileAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Copy(FileAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Rename(FileAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Create(FileAction):
        panel: PanelInfo


class Symlink:
    @dataclass(frozen=True)
    class Open(SymlinkAction):
        panel: PanelInfo
        in_new_tab: bool = False

    @dataclass(frozen=True)
    class Delete(SymlinkAction):
        panel: PanelInfo

    @dataclass(frozen=True)
    class Rename(SymlinkAction):
        source: PanelInfo
        target: PanelInfo

    @dataclass(frozen=True)
    class Create(SymlinkAction):
        panel: PanelInfo
        target: str


class Search:
    @dataclass(frozen=True)
    class Start(SearchAction):
        tab: int
        side: PanelSide

    @dataclass(frozen=True)
    class Stop(SearchAction):
        tab: int
        side: PanelSide

    @dataclass(frozen=True)
    class Input(SearchAction):
        tab: int
        side: PanelSide
        phrase: str

    @dataclass(frozen=True)
    class ApplySearch(SearchAction):
        tab: int
        side: PanelSide


class App:
    @dataclass(frozen=True)
    class ShowModal(AppAction):
        modal: object

    @dataclass(frozen=True)
    class CloseModal(AppAction):
        pass

    @dataclass(frozen=True)
    class FocusPanel(AppAction):
        side: PanelSide

    @dataclass(frozen=True)
    class ModalInput(AppAction):
        """Replace the text typed into the rename/create modal."""

        value: str

    @dataclass(frozen=True)
    class ModalCycle(AppAction):
        """Advance the create modal to the next item kind."""

    @dataclass(frozen=True)
    class ChangeSort(AppAction):
        axis: SortAxis
        order: SortOrder

    @dataclass(frozen=True)
    class Quit(AppAction):
        pass


ACTION_NAMESPACES = (Tab, Directory, File, Symlink, Search, App)


def _registry():
    registry = {}
    for namespace in ACTION_NAMESPACES:
        for name, member in vars(namespace).items():
            if isinstance(member, type) and issubclass(member, Action):
                registry[f'{namespace.__name__}.{name}'] = member
    return registry


ACTION_TYPES = _registry()
_TYPE_NAMES = {cls: name for name, cls in ACTION_TYPES.items()}
_MODAL_NAMES = {
    MessageboxModal: 'messagebox',
    RenameModal: 'rename',
    CreateModal: 'create',
    PropertiesModal: 'properties',
}
_MODAL_TYPES = {name: cls for cls, name in _MODAL_NAMES.items()}


def action_name(action):
    """Return the dotted taxonomy name, e.g. ``'Directory.Move'``."""
    return _TYPE_NAMES.get(type(action), type(action).__name__)


def _encode(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, PanelInfo):
        return {'path': value.path, 'tab': value.tab, 'side': value.side.value}
    if isinstance(value, FileSystemItem):
        return {f.name: _encode(getattr(value, f.name)) for f in fields(value)}
    if type(value) in _MODAL_NAMES:
        data = {f.name: _encode(getattr(value, f.name)) for f in fields(value)}
        data['type'] = _MODAL_NAMES[type(value)]
        return data
    return value


def serialize_action(action):
    """Return a JSON-compatible dict describing ``action``."""
    if type(action) not in _TYPE_NAMES:
        raise ValueError(f'Unknown action: {action!r}')
    data = {f.name: _encode(getattr(action, f.name)) for f in fields(action)}
    data['type'] = _TYPE_NAMES[type(action)]
    return data


def _decode_panel(raw):
    return PanelInfo(path=raw['path'], tab=int(raw['tab']), side=PanelSide(raw['side']))


def _decode_item(raw):
    known = {f.name for f in fields(FileSystemItem)}
    values = {key: value for key, value in raw.items() if key in known}
    values['kind'] = ItemKind(values['kind'])
    return FileSystemItem(**values)


def _decode_modal(raw):
    if raw is None:
        return None
    raw = dict(raw)
    cls = _MODAL_TYPES[raw.pop('type')]
    if 'side' in raw:
        raw['side'] = PanelSide(raw['side'])
    if 'item' in raw:
        raw['item'] = _decode_item(raw['item'])
    return cls(**raw)


_FIELD_DECODERS = {
    'panel': _decode_panel,
    'source': _decode_panel,
    'target': lambda raw: _decode_panel(raw) if isinstance(raw, dict) else raw,
    'side': lambda raw: PanelSide(raw) if raw is not None else None,
    'modal': _decode_modal,
    'axis': SortAxis,
    'order': SortOrder,
}


def deserialize_action(data):
    """Rebuild an action from ``serialize_action`` output."""
    data = dict(data)
    name = data.pop('type', None)
    cls = ACTION_TYPES.get(name)
    if cls is None:
        raise ValueError(f'Unknown action type: {name!r}')
    kwargs = {}
    for key, value in data.items():
        decoder = _FIELD_DECODERS.get(key)
        kwargs[key] = decoder(value) if decoder else value
    return cls(**kwargs)
