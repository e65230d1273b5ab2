"""Terminal bootstrap helpers for twinpane startup and cleanup."""

import curses
import logging
import sys

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None

LOGGER = logging.getLogger(__name__)


def configure_terminal(stdscr, timeout_ms=240):
    """Apply core curses terminal setup; input waits at most ``timeout_ms``."""
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    curses.noecho()
    curses.cbreak()
    stdscr.keypad(True)
    stdscr.nodelay(False)
    stdscr.timeout(timeout_ms)


def disable_flow_control(stdin_stream=None):
    """Disable XON/XOFF so Ctrl+Q/Ctrl+S reach the app."""
    if termios is None:
        return
    stream = sys.stdin if stdin_stream is None else stdin_stream
    try:
        fd = stream.fileno()
        attrs = termios.tcgetattr(fd)
    except (AttributeError, ValueError, OSError, termios.error):
        return

    attrs[0] &= ~(termios.IXON | termios.IXOFF)
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except termios.error:
        LOGGER.debug('Could not disable flow control', exc_info=True)


def restore_cursor():
    try:
        curses.curs_set(1)
    except curses.error:
        pass
