"""Filesystem model, port and sort policy."""
from .items import FileSystemItem, ItemKind
from .port import FileSystem, PhysicalFileSystem, expand_home
from .sorting import SortOrder, SortPolicy, sort_items

__all__ = [
    'FileSystemItem', 'ItemKind',
    'FileSystem', 'PhysicalFileSystem', 'expand_home',
    'SortOrder', 'SortPolicy', 'sort_items',
]
