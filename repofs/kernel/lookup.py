"""Path resolution over a :class:`~repofs.kernel.domain.tree.TreeCache`.

Paths are slash-delimited; empty segments are skipped, so ``/a//b`` and
``/a/b`` resolve to the same entry and ``/`` resolves to the root.
"""

from __future__ import annotations

import posixpath
from typing import Literal, overload

from repofs.kernel.domain.tree import DirectoryNode, Entry, FileNode, TreeCache
from repofs.kernel.domain.uri import VirtualUri
from repofs.kernel.exceptions import (
    EntryIsADirectoryError,
    EntryNotADirectoryError,
    EntryNotFoundError,
)

PathLike = str | VirtualUri


def _path_of(target: PathLike) -> str:
    return target.path if isinstance(target, VirtualUri) else target


@overload
def lookup(tree: TreeCache, target: PathLike, *, silent: Literal[False] = ...) -> Entry: ...
@overload
def lookup(tree: TreeCache, target: PathLike, *, silent: bool) -> Entry | None: ...
def lookup(tree: TreeCache, target: PathLike, *, silent: bool = False) -> Entry | None:
    """Resolve ``target`` to a cached entry.

    Raises
    ------
    EntryNotADirectoryError
        If an intermediate segment names a file.
    EntryNotFoundError
        If a segment has no matching child and ``silent`` is false.
    """
    entry: Entry = tree.root
    for part in _path_of(target).split("/"):
        if not part:
            continue
        match entry:
            case DirectoryNode():
                child = entry.children.get(part)
            case FileNode():
                raise EntryNotADirectoryError(target)
        if child is None:
            if silent:
                return None
            raise EntryNotFoundError(target)
        entry = child
    return entry


@overload
def lookup_directory(
    tree: TreeCache, target: PathLike, *, silent: Literal[False] = ...
) -> DirectoryNode: ...
@overload
def lookup_directory(
    tree: TreeCache, target: PathLike, *, silent: bool
) -> DirectoryNode | None: ...
def lookup_directory(
    tree: TreeCache, target: PathLike, *, silent: bool = False
) -> DirectoryNode | None:
    """Resolve ``target`` and require a directory."""
    match lookup(tree, target, silent=silent):
        case DirectoryNode() as directory:
            return directory
        case FileNode():
            raise EntryNotADirectoryError(target)
        case None:
            return None


@overload
def lookup_file(tree: TreeCache, target: PathLike, *, silent: Literal[False] = ...) -> FileNode: ...
@overload
def lookup_file(tree: TreeCache, target: PathLike, *, silent: bool) -> FileNode | None: ...
def lookup_file(tree: TreeCache, target: PathLike, *, silent: bool = False) -> FileNode | None:
    """Resolve ``target`` and require a file."""
    match lookup(tree, target, silent=silent):
        case FileNode() as file:
            return file
        case DirectoryNode():
            raise EntryIsADirectoryError(target)
        case None:
            return None


def lookup_parent_directory(tree: TreeCache, target: PathLike) -> DirectoryNode:
    """Resolve the directory that contains ``target``."""
    if isinstance(target, VirtualUri):
        parent: PathLike = target.parent
    else:
        parent = posixpath.dirname(target)
    directory = lookup_directory(tree, parent, silent=True)
    if directory is None:
        raise EntryNotFoundError(parent)
    return directory


__all__ = [
    "PathLike",
    "lookup",
    "lookup_directory",
    "lookup_file",
    "lookup_parent_directory",
]
