"""Entry model and tree cache.

The cache is a single rooted tree of :class:`DirectoryNode` and
:class:`FileNode`. A directory with no children has not been listed yet; a
file whose ``data`` is ``None`` has not been fetched yet.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

from repofs.kernel.domain.vfs import EntryType, FileStat


@dataclass(slots=True)
class FileNode:
    """A file entry, possibly with deferred content."""

    name: str
    download_url: str | None = None
    data: bytes | None = None
    size: int = 0
    ctime: float = field(default_factory=time.time)
    mtime: float = field(default_factory=time.time)
    kind: Literal[EntryType.FILE] = field(default=EntryType.FILE, init=False)

    @property
    def is_deferred(self) -> bool:
        """True while the content has not been fetched."""
        return self.data is None

    def set_content(self, content: bytes | None) -> None:
        self.data = content
        self.size = len(content) if content is not None else 0
        self.mtime = time.time()

    def to_stat(self) -> FileStat:
        return FileStat(type=self.kind, ctime=self.ctime, mtime=self.mtime, size=self.size)


@dataclass(slots=True)
class DirectoryNode:
    """A directory entry; its children are filled by population."""

    name: str
    children: dict[str, Entry] = field(default_factory=dict)
    ctime: float = field(default_factory=time.time)
    mtime: float = field(default_factory=time.time)
    kind: Literal[EntryType.DIRECTORY] = field(default=EntryType.DIRECTORY, init=False)

    @property
    def entry_count(self) -> int:
        return len(self.children)

    @property
    def is_populated(self) -> bool:
        return bool(self.children)

    def add_child(self, entry: Entry) -> None:
        self.children[entry.name] = entry
        self.mtime = time.time()

    def to_stat(self) -> FileStat:
        return FileStat(type=self.kind, ctime=self.ctime, mtime=self.mtime, size=self.entry_count)


Entry = FileNode | DirectoryNode


class TreeCache:
    """Owner of the rooted entry tree for one provider instance.

    Nodes are never removed; the tree only grows as it is populated.
    """

    def __init__(self) -> None:
        self._root = DirectoryNode(name="")

    @property
    def root(self) -> DirectoryNode:
        return self._root


__all__ = ["DirectoryNode", "Entry", "FileNode", "TreeCache"]
