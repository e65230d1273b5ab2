"""Main loop helpers for twinpane."""

import curses
import logging
import time

from .reconcile import run_tick

LOGGER = logging.getLogger(__name__)


def read_input_key(stdscr):
    """Read one key from curses, returning None on timeout/no input."""
    try:
        return stdscr.get_wch()
    except curses.error:
        return None


def dispatch_input(app, key):
    """Dispatch one input event."""
    if key is None:
        return

    if isinstance(key, int) and key == curses.KEY_RESIZE:
        curses.update_lines_cols()
        app.needs_redraw = True
        return

    app.handle_key(key)


def tick_due(last_tick, tick_rate_ms, now):
    return (now - last_tick) * 1000 >= tick_rate_ms


def run_app_loop(app, clock=time.monotonic):
    """Draw, wait for a key, dispatch, reconcile; restores the terminal on exit."""
    last_tick = clock()
    try:
        while app.running:
            if app.needs_redraw:
                app.draw()
            key = read_input_key(app.stdscr)
            dispatch_input(app, key)

            now = clock()
            if tick_due(last_tick, app.store.state.config.tick_rate, now):
                run_tick(app.store)
                last_tick = now
    finally:
        app.cleanup()
