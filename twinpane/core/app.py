"""
Main twinpane application class.
"""
import logging

from .. import __version__
from ..filesystem.port import PhysicalFileSystem
from ..utils import check_unicode_support, init_colors
from .bootstrap import configure_terminal, disable_flow_control, restore_cursor
from .config import load_config
from .event_loop import run_app_loop
from .key_router import build_keymap, handle_key_event
from .launcher import ProgramLauncher
from .rendering import draw_frame
from .store import Store

LOGGER = logging.getLogger(__name__)


class TwinPane:
    """Wires config, filesystem, store, launcher and the curses screen together."""
    MIN_TERM_WIDTH = 40
    MIN_TERM_HEIGHT = 10

    def __init__(self, stdscr, *, filesystem=None, config=None, start_paths=(None, None), keymap=None):
        self.stdscr = stdscr
        self.filesystem = filesystem or PhysicalFileSystem()
        self.config = config or load_config(self.filesystem)
        self.keymap = keymap if keymap is not None else build_keymap(self.config.key_bindings)
        self.use_unicode = check_unicode_support()
        self.needs_redraw = True

        configure_terminal(stdscr, timeout_ms=self.config.tick_rate)
        self._validate_terminal_size()
        disable_flow_control()
        init_colors()

        self.launcher = ProgramLauncher(stdscr)
        self.store = Store(
            self.filesystem, self.config, start_paths=start_paths, launcher=self.launcher,
        )
        self._unsubscribe = self.store.subscribe(self._on_state_change)
        LOGGER.debug('twinpane %s started', __version__)

    @property
    def running(self):
        return self.store.running

    def _validate_terminal_size(self):
        """Fail fast when terminal is too small for two panels."""
        h, w = self.stdscr.getmaxyx()
        if h < self.MIN_TERM_HEIGHT or w < self.MIN_TERM_WIDTH:
            raise ValueError(
                f'Terminal too small ({w}x{h}). '
                f'Minimum supported size is {self.MIN_TERM_WIDTH}x{self.MIN_TERM_HEIGHT}.'
            )

    def _on_state_change(self, _state):
        self.needs_redraw = True

    def draw(self):
        draw_frame(self.stdscr, self.store.state, __version__, unicode=self.use_unicode)
        self.needs_redraw = False

    def handle_key(self, key):
        handle_key_event(self.store, key, self.keymap)

    def run(self):
        run_app_loop(self)

    def cleanup(self):
        """Restore terminal state."""
        self._unsubscribe()
        restore_cursor()
