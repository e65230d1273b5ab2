"""
Filesystem port consumed by the store, and the physical implementation.

The store never touches ``os`` directly: every listing, existence check and
mutation goes through a ``FileSystem`` instance handed to it. Mutating
methods raise ``OSError`` on failure.
"""
import logging
import os
import shutil
import stat

try:
    import pwd
except ImportError:
    pwd = None
try:
    import grp
except ImportError:
    grp = None

from .items import FileSystemItem, ItemKind
from .sorting import sort_items

LOGGER = logging.getLogger(__name__)


def expand_home(path):
    """Expand a leading ``~`` to the user's home directory."""
    if path is None:
        return None
    return os.path.expanduser(str(path))


class FileSystem:
    """Port interface. Implementations must override every method."""

    def exists(self, path):
        raise NotImplementedError

    def is_dir(self, path):
        raise NotImplementedError

    def list_dir(self, path, sort_policy=None):
        """Return a fresh, sorted list of ``FileSystemItem`` for ``path``."""
        raise NotImplementedError

    def read_to_string(self, path):
        """Return file contents, or None when the file cannot be read."""
        raise NotImplementedError

    def delete_file(self, path):
        raise NotImplementedError

    def delete_dir(self, path):
        """Recursive removal."""
        raise NotImplementedError

    def delete_empty_dir(self, path):
        raise NotImplementedError

    def rename(self, source, target):
        raise NotImplementedError

    def copy_file(self, source, target):
        """Copy one file; return the number of bytes copied."""
        raise NotImplementedError

    def copy_dir(self, source, target):
        """Copy a directory tree; return the number of bytes copied."""
        raise NotImplementedError

    def create_symlink(self, target, link):
        """Create ``link`` pointing at ``target``."""
        raise NotImplementedError

    def create_file(self, path):
        raise NotImplementedError

    def create_dir(self, path):
        raise NotImplementedError


def _owner_name(uid):
    if pwd is None:
        return str(uid)
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def _group_name(gid):
    if grp is None:
        return str(gid)
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def _dir_is_empty(path):
    try:
        with os.scandir(path) as it:
            return next(it, None) is None
    except OSError:
        return False


def map_dir_entry(entry):
    """Build a ``FileSystemItem`` from an ``os.DirEntry``."""
    try:
        st = entry.stat(follow_symlinks=False)
    except OSError:
        return FileSystemItem.unknown(entry.path)

    meta = {
        'name': entry.name,
        'created': getattr(st, 'st_birthtime', st.st_ctime),
        'modified': st.st_mtime,
        'accessed': st.st_atime,
        'size': st.st_size,
        'mode': st.st_mode,
        'inode': st.st_ino,
        'nlink': st.st_nlink,
        'username': _owner_name(getattr(st, 'st_uid', 0)),
        'groupname': _group_name(getattr(st, 'st_gid', 0)),
        'blocksize': getattr(st, 'st_blksize', 0),
        'blocks': getattr(st, 'st_blocks', 0),
    }

    if stat.S_ISLNK(st.st_mode):
        try:
            target = os.readlink(entry.path)
        except OSError:
            target = entry.path
        return FileSystemItem(ItemKind.SYMLINK, entry.path, target=target, **meta)
    if stat.S_ISDIR(st.st_mode):
        return FileSystemItem(ItemKind.DIRECTORY, entry.path, is_empty=_dir_is_empty(entry.path), **meta)
    if stat.S_ISREG(st.st_mode):
        return FileSystemItem(ItemKind.FILE, entry.path, **meta)
    return FileSystemItem(ItemKind.UNKNOWN, entry.path, **meta)


class PhysicalFileSystem(FileSystem):
    """Port implementation backed by the local disk."""

    def exists(self, path):
        return os.path.lexists(path)

    def is_dir(self, path):
        return os.path.isdir(path)

    def list_dir(self, path, sort_policy=None):
        try:
            with os.scandir(path) as it:
                items = [map_dir_entry(entry) for entry in it]
        except OSError as exc:
            LOGGER.warning('Cannot list %s: %s', path, exc)
            return []
        return sort_items(items, sort_policy)

    def read_to_string(self, path):
        try:
            with open(path, 'r', encoding='utf-8') as stream:
                return stream.read()
        except (OSError, UnicodeDecodeError):
            return None

    def delete_file(self, path):
        os.remove(path)

    def delete_dir(self, path):
        shutil.rmtree(path)

    def delete_empty_dir(self, path):
        os.rmdir(path)

    def rename(self, source, target):
        os.rename(source, target)

    def copy_file(self, source, target):
        shutil.copy2(source, target, follow_symlinks=False)
        return os.lstat(target).st_size

    def copy_dir(self, source, target):
        shutil.copytree(source, target, symlinks=True)
        total = 0
        for root, _, files in os.walk(target):
            for name in files:
                try:
                    total += os.lstat(os.path.join(root, name)).st_size
                except OSError:
                    continue
        return total

    def create_symlink(self, target, link):
        os.symlink(target, expand_home(link), target_is_directory=os.path.isdir(target))

    def create_file(self, path):
        with open(path, 'x', encoding='utf-8'):
            pass

    def create_dir(self, path):
        os.mkdir(path)
