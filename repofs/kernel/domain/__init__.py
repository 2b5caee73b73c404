"""Domain models for the tree cache."""

from repofs.kernel.domain.disposable import Disposable
from repofs.kernel.domain.tree import DirectoryNode, Entry, FileNode, TreeCache
from repofs.kernel.domain.uri import DEFAULT_SCHEME, VirtualUri
from repofs.kernel.domain.vfs import EntryType, FileStat, RemoteItem

__all__ = [
    "DEFAULT_SCHEME",
    "DirectoryNode",
    "Disposable",
    "Entry",
    "EntryType",
    "FileNode",
    "FileStat",
    "RemoteItem",
    "TreeCache",
    "VirtualUri",
]
