"""
Translate user intents into ordered action lists.

Every function here reads an ``AppState`` snapshot and returns the actions
the key router should dispatch, in order. Nothing touches the filesystem or
the store, which keeps batch expansion easy to test on its own.
"""
import os

from ..filesystem.port import expand_home
from ..filesystem.sorting import SortAxis, SortOrder
from .actions import App, Directory, File, Search, Symlink, Tab
from .file_operations import destination_for, is_within
from .state import (
    CreateModal,
    MessageboxModal,
    PanelInfo,
    PanelSide,
    PropertiesModal,
    RenameModal,
)


def _side(state, side):
    return PanelSide(side) if side is not None else state.focused_side


def _active(state, side):
    panel = state.panel(side)
    return panel.current_tab, panel.active_tab()


def _info(path, side, tab_index):
    return PanelInfo(path=path, tab=tab_index, side=side)


def _message(text):
    return App.ShowModal(MessageboxModal(text))


def open_item(item, side, tab_index, in_new_tab=False):
    """Open action matching the kind of ``item``."""
    info = _info(item.path, side, tab_index)
    if item.is_dir:
        return Directory.Open(info, in_new_tab=in_new_tab)
    if item.is_symlink:
        return Symlink.Open(info, in_new_tab=in_new_tab)
    if item.is_file:
        return File.Open(info)
    return _message(f"Can't open {item.name}: unsupported file type")


def open_selection(state, side=None, in_new_tab=False):
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    item = tab.current_item()
    if item is None:
        return []
    return [open_item(item, side, tab_index, in_new_tab)]


def open_in_new_tab(state, side=None):
    """Duplicate the active tab's directory into a new tab."""
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    return [Directory.Open(_info(tab.path, side, tab_index), in_new_tab=True)]


def navigate_up(state, side=None):
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    path = os.path.normpath(tab.path)
    parent = os.path.dirname(path)
    if parent == path:
        return []
    return [Directory.Open(_info(parent, side, tab_index))]


def jump_to_hotkey(state, side, command):
    """Open the directory bound to ``command`` in the active tab."""
    side = _side(state, side)
    path = state.config.hotkey_path(command)
    if not path:
        return []
    tab_index, _tab = _active(state, side)
    return [Directory.Open(_info(os.path.normpath(expand_home(path)), side, tab_index))]


def delete_selection(state, side=None):
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    targets = tab.targets()
    if not targets:
        return []

    actions = []
    for item in targets:
        info = _info(item.path, side, tab_index)
        if item.is_dir:
            actions.append(Directory.Delete(info, is_empty=item.is_empty))
        elif item.is_symlink:
            actions.append(Symlink.Delete(info))
        else:
            actions.append(File.Delete(info))
    actions.append(Tab.SelectNext(side=side))
    return actions


def transfer_selection(state, side=None, move=True):
    """Move or copy the batch to the directory of the opposite panel."""
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    targets = tab.targets()
    if not targets:
        return []

    destination_side = side.opposite
    destination_index, destination_tab = _active(state, destination_side)
    verb = 'move' if move else 'copy'

    actions = []
    for item in targets:
        target_path = destination_for(item.path, destination_tab.path)
        if os.path.normpath(item.path) == os.path.normpath(target_path) or (
            item.is_dir and is_within(destination_tab.path, item.path)
        ):
            actions.append(_message(f"Can't {verb} {item.name} into itself"))
            continue

        source = _info(item.path, side, tab_index)
        target = _info(target_path, destination_side, destination_index)
        if item.is_dir:
            actions.append(Directory.Move(source, target) if move else Directory.Copy(source, target))
        else:
            actions.append(File.Move(source, target) if move else File.Copy(source, target))
    actions.append(Tab.Next(side=destination_side))
    return actions


def begin_rename(state, side=None):
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    item = tab.current_item()
    if item is None:
        return []
    return [App.ShowModal(RenameModal(side, tab_index, item, value=item.name))]


def begin_create(state, side=None):
    """Open the create modal; a new symlink points at the item under the cursor."""
    side = _side(state, side)
    tab_index, tab = _active(state, side)
    item = tab.current_item()
    target = item.path if item is not None else None
    return [App.ShowModal(CreateModal(0, side, tab_index, tab.path, target=target))]


def show_properties(state, side=None):
    side = _side(state, side)
    _tab_index, tab = _active(state, side)
    item = tab.current_item()
    if item is None:
        return []
    return [App.ShowModal(PropertiesModal(item))]


def _confirm_rename(modal):
    name = modal.value.strip()
    item = modal.item
    if not name or name == item.name:
        return [App.CloseModal()]
    if os.sep in name:
        return [App.CloseModal(), _message(f'Invalid name: {name}')]

    source = _info(item.path, modal.side, modal.tab)
    target = _info(os.path.join(os.path.dirname(item.path), name), modal.side, modal.tab)
    if item.is_dir:
        rename = Directory.Rename(source, target)
    elif item.is_symlink:
        rename = Symlink.Rename(source, target)
    else:
        rename = File.Rename(source, target)
    return [App.CloseModal(), rename]


def _confirm_create(modal):
    name = modal.value.strip()
    if not name:
        return [App.CloseModal()]
    if os.sep in name:
        return [App.CloseModal(), _message(f'Invalid name: {name}')]

    info = _info(os.path.join(modal.path, name), modal.side, modal.tab)
    if modal.kind == 'Directory':
        create = Directory.Create(info)
    elif modal.kind == 'Symlink':
        if not modal.target:
            return [App.CloseModal(), _message('Nothing under the cursor to link to')]
        create = Symlink.Create(info, target=modal.target)
    else:
        create = File.Create(info)
    return [App.CloseModal(), create]


def confirm_modal(state):
    """Actions for pressing Enter in the open modal."""
    modal = state.modal
    if isinstance(modal, RenameModal):
        return _confirm_rename(modal)
    if isinstance(modal, CreateModal):
        return _confirm_create(modal)
    if modal is not None:
        return [App.CloseModal()]
    return []


def switch_panel(state):
    return [App.FocusPanel(state.focused_side.opposite)]


def cycle_tab(state, side=None, step=1):
    side = _side(state, side)
    panel = state.panel(side)
    if len(panel.tabs) < 2:
        return []
    return [Tab.SwitchTab(side, (panel.current_tab + step) % len(panel.tabs))]


def close_tab(state, side=None):
    side = _side(state, side)
    return [Tab.CloseTab(side, state.panel(side).current_tab)]


_NEXT_ORDER = {
    SortOrder.NONE: SortOrder.ASC,
    SortOrder.ASC: SortOrder.DESC,
    SortOrder.DESC: SortOrder.NONE,
}


def cycle_sort(state, axis):
    """Step one sort axis through asc, desc and none."""
    axis = SortAxis(axis)
    policy = state.config.sort_policy()
    current = {
        SortAxis.NAME: policy.by_name,
        SortAxis.DATE: policy.by_date,
        SortAxis.ATTR: policy.by_attr,
    }[axis]
    return [App.ChangeSort(axis, _NEXT_ORDER[current])]


# Search keys


def start_search(state, side=None):
    side = _side(state, side)
    return [Search.Start(tab=state.panel(side).current_tab, side=side)]


def search_input(state, phrase, side=None):
    side = _side(state, side)
    return [Search.Input(tab=state.panel(side).current_tab, side=side, phrase=phrase)]


def apply_search(state, side=None):
    side = _side(state, side)
    return [Search.ApplySearch(tab=state.panel(side).current_tab, side=side)]


def stop_search(state, side=None):
    side = _side(state, side)
    return [Search.Stop(tab=state.panel(side).current_tab, side=side)]
