"""Open files with their associated program while curses is suspended."""
import curses
import logging
import os
import shlex
import shutil
import subprocess

from .errors import ErrorKind, OperationFailure, failure_from_os_error

LOGGER = logging.getLogger(__name__)


def file_extension(path):
    """Lower-case extension without the dot, '' when there is none."""
    return os.path.splitext(os.path.basename(path))[1].lstrip('.').lower()


class ProgramLauncher:
    """Callable used by the store for File.Open; returns None or an OperationFailure."""

    def __init__(self, stdscr=None, run=subprocess.run, environ=None):
        self.stdscr = stdscr
        self._run = run
        self._environ = os.environ if environ is None else environ

    def command_for(self, path, config):
        """Build the argv that opens ``path``, or None when nothing is configured."""
        program = config.program_for(file_extension(path)) or self._environ.get('EDITOR')
        if not program:
            return None
        argv = shlex.split(program)
        if not argv or shutil.which(argv[0]) is None:
            return None
        return argv + [path]

    def __call__(self, path, config):
        argv = self.command_for(path, config)
        if argv is None:
            LOGGER.info('No program configured for %s', path)
            return OperationFailure(ErrorKind.UNRESOLVABLE, path, 'No program associated')

        LOGGER.debug('Launching %s', argv)
        try:
            self._suspend()
            result = self._run(argv)
        except OSError as exc:
            LOGGER.warning('Launching %s failed: %s', argv[0], exc)
            return failure_from_os_error(exc, path, 'open')
        finally:
            self._resume()

        if result.returncode != 0:
            return OperationFailure(
                ErrorKind.PERMISSION_OR_IO, path, f'{argv[0]} exited with code {result.returncode}',
            )
        return None

    def _suspend(self):
        if self.stdscr is None:
            return
        try:
            curses.def_prog_mode()
            curses.endwin()
        except curses.error:
            LOGGER.debug('Could not suspend curses', exc_info=True)

    def _resume(self):
        if self.stdscr is None:
            return
        try:
            curses.reset_prog_mode()
            self.stdscr.refresh()
        except curses.error:
            LOGGER.debug('Could not restore curses', exc_info=True)
