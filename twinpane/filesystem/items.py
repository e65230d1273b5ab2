"""
Filesystem item snapshots shown in a tab listing.
"""
import os
import stat
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ItemKind(str, Enum):
    """Closed set of listing entry kinds."""

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FileSystemItem:
    """Immutable snapshot of one directory entry at listing time.

    Identity is the absolute ``path``: two items with the same path compare
    equal and hash the same, whatever their metadata says.
    """

    kind: ItemKind = field(compare=False)
    path: str
    name: str = field(default='', compare=False)
    created: float = field(default=0.0, compare=False)
    modified: float = field(default=0.0, compare=False)
    accessed: float = field(default=0.0, compare=False)
    size: int = field(default=0, compare=False)
    mode: int = field(default=0, compare=False)
    inode: int = field(default=0, compare=False)
    nlink: int = field(default=0, compare=False)
    username: str = field(default='', compare=False)
    groupname: str = field(default='', compare=False)
    blocksize: int = field(default=0, compare=False)
    blocks: int = field(default=0, compare=False)
    target: Optional[str] = field(default=None, compare=False)
    is_empty: bool = field(default=False, compare=False)

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, 'name', os.path.basename(self.path.rstrip(os.sep)))

    def __hash__(self):
        return hash(self.path)

    @property
    def is_dir(self):
        return self.kind == ItemKind.DIRECTORY

    @property
    def is_file(self):
        return self.kind == ItemKind.FILE

    @property
    def is_symlink(self):
        return self.kind == ItemKind.SYMLINK

    @property
    def is_unknown(self):
        return self.kind == ItemKind.UNKNOWN

    @property
    def is_hidden(self):
        return self.name.startswith('.')

    @property
    def extension(self):
        """Lower-cased extension without the dot, '' when there is none."""
        _, ext = os.path.splitext(self.name)
        return ext[1:].lower()

    @property
    def display_name(self):
        if self.is_dir:
            return f'{self.name}/'
        if self.is_symlink:
            return f'{self.name} -> {self.target or "?"}'
        return self.name

    @classmethod
    def directory(cls, path, *, is_empty=False, **meta):
        return cls(ItemKind.DIRECTORY, path, is_empty=is_empty, **meta)

    @classmethod
    def regular_file(cls, path, **meta):
        return cls(ItemKind.FILE, path, **meta)

    @classmethod
    def symlink(cls, path, target, **meta):
        return cls(ItemKind.SYMLINK, path, target=target, **meta)

    @classmethod
    def unknown(cls, path):
        return cls(ItemKind.UNKNOWN, path)


def format_size(size):
    """Human readable byte count (B/K/M/G)."""
    if size > 1073741824:
        return f'{size / 1073741824:.1f}G'
    if size > 1048576:
        return f'{size / 1048576:.1f}M'
    if size > 1024:
        return f'{size / 1024:.1f}K'
    return f'{size}B'


def format_mode(item):
    """Return an ``ls -l`` style permission string for the item."""
    mode = item.mode
    if not stat.S_IFMT(mode):
        if item.is_dir:
            mode |= stat.S_IFDIR
        elif item.is_symlink:
            mode |= stat.S_IFLNK
        elif item.is_file:
            mode |= stat.S_IFREG
    return stat.filemode(mode)


def format_timestamp(value):
    if not value:
        return '-'
    return datetime.fromtimestamp(value).strftime('%Y-%m-%d %H:%M')


def describe_item(item):
    """Metadata lines for the properties modal."""
    lines = [
        f'Name: {item.name}',
        f'Path: {item.path}',
        f'Type: {item.kind.value}',
        f'Size: {format_size(item.size)}',
        f'Perm: {format_mode(item)}',
        f'Owner: {item.username or "-"}:{item.groupname or "-"}',
        f'Inode: {item.inode}  Links: {item.nlink}',
        f'Blocks: {item.blocks} x {item.blocksize}',
        f'Created: {format_timestamp(item.created)}',
        f'Modified: {format_timestamp(item.modified)}',
        f'Accessed: {format_timestamp(item.accessed)}',
    ]
    if item.is_symlink:
        lines.append(f'Target: {item.target or "-"}')
    return lines
