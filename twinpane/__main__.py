"""
Entry point for twinpane.
"""
import argparse
import curses
import locale
import logging
import os

from . import __version__
from .core.app import TwinPane

LOGGER = logging.getLogger(__name__)

DEFAULT_LOG_PATH = os.path.join('~', '.cache', 'twinpane', 'twinpane.log')


def configure_logging(environ=None):
    """Log to a file when TWINPANE_DEBUG is set; curses owns the terminal."""
    environ = os.environ if environ is None else environ
    if not environ.get('TWINPANE_DEBUG'):
        return None
    path = os.path.expanduser(environ.get('TWINPANE_LOG') or DEFAULT_LOG_PATH)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    logging.basicConfig(
        filename=path,
        level=logging.DEBUG,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    return path


def build_parser():
    parser = argparse.ArgumentParser(prog='twinpane', description='Two-panel terminal file manager.')
    parser.add_argument('left', nargs='?', help='directory shown in the left panel')
    parser.add_argument('right', nargs='?', help='directory shown in the right panel')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def run(start_paths=(None, None)):
    """Run twinpane and return process exit code."""

    def main(stdscr):
        TwinPane(stdscr, start_paths=start_paths).run()

    try:
        curses.wrapper(main)
        return 0
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        # Any crash must still restore the terminal.
        LOGGER.exception('twinpane crashed')
        try:
            curses.endwin()
        except curses.error:
            pass
        print(f'\nError: {e}')
        return 1


def main_cli(argv=None):
    """Console script entrypoint."""
    args = build_parser().parse_args(argv)
    try:
        locale.setlocale(locale.LC_ALL, '')
    except locale.Error:
        pass
    configure_logging()
    return run((args.left, args.right))


if __name__ == '__main__':
    raise SystemExit(main_cli())
