"""File system providers and their host-side registry."""

from repofs.drivers.vfs.registry import FileSystemRegistry
from repofs.drivers.vfs.remote_tree import RemoteTreeProvider

__all__ = ["FileSystemRegistry", "RemoteTreeProvider"]
