"""Periodic check that cached listings still match the disk."""
import logging

from .actions import Tab
from .state import PanelSide

LOGGER = logging.getLogger(__name__)


def reconcile_tab(state, side, filesystem):
    """Return a ReloadTab for the side's active tab when an item vanished, else None."""
    tab = state.panel(side).active_tab()
    if not filesystem.is_dir(tab.path):
        return Tab.ReloadTab(side=PanelSide(side), path=tab.path)
    for item in tab.items:
        if not filesystem.exists(item.path):
            LOGGER.debug('Cached item %s vanished, reloading %s', item.path, tab.path)
            return Tab.ReloadTab(side=PanelSide(side), path=tab.path)
    return None


def run_tick(store):
    """Reconcile both panels; returns the number of reloads dispatched."""
    reloads = 0
    for side in PanelSide:
        action = reconcile_tab(store.state, side, store.filesystem)
        if action is not None and store.dispatch(action):
            reloads += 1
    return reloads
