"""
Filesystem mutations behind Directory/File/Symlink actions.

Each helper checks for conflicts before touching the disk, then calls the
filesystem port. Success returns None; any problem returns an
``OperationFailure`` so the store can report it item by item. Nothing is
rolled back: a batch is a series of independent calls.
"""
import errno
import logging
import os

from .errors import ErrorKind, OperationFailure, failure_from_os_error

LOGGER = logging.getLogger(__name__)


def _norm(path):
    return os.path.normpath(str(path))


def is_within(path, parent):
    """True when ``path`` equals ``parent`` or lies below it."""
    path, parent = _norm(path), _norm(parent)
    if path == parent:
        return True
    prefix = parent if parent.endswith(os.sep) else parent + os.sep
    return path.startswith(prefix)


def destination_for(source_path, destination_dir):
    """Destination tab path joined with the source base name."""
    return os.path.join(destination_dir, os.path.basename(_norm(source_path)))


def _missing(fs, path):
    if fs.exists(path):
        return None
    return OperationFailure(ErrorKind.NOT_FOUND, path, 'No longer exists')


def check_transfer(fs, source, target, *, is_dir, verb):
    """Return the conflict that forbids moving/copying ``source`` to ``target``."""
    if _norm(source) == _norm(target):
        return OperationFailure(ErrorKind.CONFLICT, source, f"Can't {verb} onto itself")
    if is_dir and is_within(target, source):
        return OperationFailure(
            ErrorKind.CONFLICT, source, f"Can't {verb} into its own subdirectory {target}",
        )
    failure = _missing(fs, source)
    if failure:
        return failure
    if fs.exists(target):
        return OperationFailure(ErrorKind.CONFLICT, target, 'Destination already exists')
    return None


def delete_directory(fs, path, is_empty):
    failure = _missing(fs, path)
    if failure:
        return failure
    try:
        if is_empty:
            fs.delete_empty_dir(path)
        else:
            fs.delete_dir(path)
    except OSError as exc:
        LOGGER.warning('Delete directory %s failed: %s', path, exc)
        return failure_from_os_error(exc, path, 'delete')
    LOGGER.debug('Deleted directory %s (empty=%s)', path, is_empty)
    return None


def delete_entry(fs, path):
    """Remove a file or a symlink (never its target)."""
    failure = _missing(fs, path)
    if failure:
        return failure
    try:
        fs.delete_file(path)
    except OSError as exc:
        LOGGER.warning('Delete %s failed: %s', path, exc)
        return failure_from_os_error(exc, path, 'delete')
    LOGGER.debug('Deleted %s', path)
    return None


def _copy(fs, source, target, is_dir):
    if is_dir:
        return fs.copy_dir(source, target)
    return fs.copy_file(source, target)


def move_item(fs, source, target, *, is_dir):
    failure = check_transfer(fs, source, target, is_dir=is_dir, verb='move')
    if failure:
        return failure
    try:
        fs.rename(source, target)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            LOGGER.warning('Move %s -> %s failed: %s', source, target, exc)
            return failure_from_os_error(exc, source, 'move')
        LOGGER.debug('Cross-device move %s -> %s, copying instead', source, target)
        try:
            _copy(fs, source, target, is_dir)
            if is_dir:
                fs.delete_dir(source)
            else:
                fs.delete_file(source)
        except OSError as copy_exc:
            LOGGER.warning('Cross-device move %s -> %s failed: %s', source, target, copy_exc)
            return failure_from_os_error(copy_exc, source, 'move')
    LOGGER.debug('Moved %s -> %s', source, target)
    return None


def copy_item(fs, source, target, *, is_dir):
    failure = check_transfer(fs, source, target, is_dir=is_dir, verb='copy')
    if failure:
        return failure
    try:
        copied = _copy(fs, source, target, is_dir)
    except OSError as exc:
        LOGGER.warning('Copy %s -> %s failed: %s', source, target, exc)
        return failure_from_os_error(exc, source, 'copy')
    LOGGER.debug('Copied %s -> %s (%s bytes)', source, target, copied)
    return None


def rename_item(fs, source, target):
    if _norm(source) == _norm(target):
        return None
    if not os.path.basename(_norm(target)) or os.path.dirname(_norm(target)) != os.path.dirname(_norm(source)):
        return OperationFailure(ErrorKind.CONFLICT, target, 'Invalid name')
    failure = _missing(fs, source)
    if failure:
        return failure
    if fs.exists(target):
        return OperationFailure(ErrorKind.CONFLICT, target, 'Destination already exists')
    try:
        fs.rename(source, target)
    except OSError as exc:
        LOGGER.warning('Rename %s -> %s failed: %s', source, target, exc)
        return failure_from_os_error(exc, source, 'rename')
    return None


def create_item(fs, kind, path, target=None):
    """Create a file, directory or symlink at ``path``."""
    name = os.path.basename(_norm(path))
    if not name or name in ('.', '..'):
        return OperationFailure(ErrorKind.CONFLICT, path, 'Name cannot be empty')
    if fs.exists(path):
        return OperationFailure(ErrorKind.CONFLICT, path, 'A file or folder with that name already exists')
    try:
        if kind == 'Directory':
            fs.create_dir(path)
        elif kind == 'Symlink':
            if not target:
                return OperationFailure(ErrorKind.NOT_FOUND, path, 'Symlink needs a target')
            fs.create_symlink(target, path)
        else:
            fs.create_file(path)
    except OSError as exc:
        LOGGER.warning('Create %s %s failed: %s', kind, path, exc)
        return failure_from_os_error(exc, path, 'create')
    return None
