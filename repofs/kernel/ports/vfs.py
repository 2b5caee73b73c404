"""File system provider port — what repofs exposes to a host environment.

The host addresses entries by :class:`~repofs.kernel.domain.uri.VirtualUri`
(``scheme:/path``). Reads may populate the cache from the remote origin;
every mutation from outside the cache's own population is refused.

Drivers
-------
- ``RemoteTreeProvider`` — lazily populated mirror of a remote repository.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from repofs.kernel.domain.disposable import Disposable
    from repofs.kernel.domain.uri import VirtualUri
    from repofs.kernel.domain.vfs import EntryType, FileStat
    from repofs.kernel.events.batching import ChangeListener


@runtime_checkable
class FileSystemProvider(Protocol):
    """Uniform hierarchical file access for one virtual scheme."""

    @abstractmethod
    def stat(self, uri: str | VirtualUri) -> FileStat:
        """Get metadata about a cached path.

        Raises
        ------
        EntryNotFoundError
            If the path is not in the cache.
        """
        ...

    @abstractmethod
    async def read_directory(self, uri: str | VirtualUri) -> list[tuple[str, EntryType]]:
        """List ``(name, kind)`` pairs of a directory, populating it on first access.

        Raises
        ------
        EntryNotADirectoryError
            If the path names a file.
        RemoteUnavailableError
            If the directory had to be fetched and the fetch failed.
        """
        ...

    @abstractmethod
    async def read_file(self, uri: str | VirtualUri) -> bytes:
        """Return a file's bytes, fetching them on first access.

        Raises
        ------
        EntryIsADirectoryError
            If the path names a directory.
        EntryNotFoundError
            If the path is absent or the file has no download locator.
        """
        ...

    @abstractmethod
    def write_file(
        self,
        uri: str | VirtualUri,
        content: bytes | None,
        *,
        create: bool,
        overwrite: bool,
        internal: bool = False,
        download_url: str | None = None,
    ) -> None:
        """Write a file into the cache (population only)."""
        ...

    @abstractmethod
    def create_directory(self, uri: str | VirtualUri, *, internal: bool = False) -> None:
        """Create a directory in the cache (population only)."""
        ...

    @abstractmethod
    def rename(
        self, old_uri: str | VirtualUri, new_uri: str | VirtualUri, *, overwrite: bool = False
    ) -> None:
        """Always refused."""
        ...

    @abstractmethod
    def delete(self, uri: str | VirtualUri, *, recursive: bool = False) -> None:
        """Always refused."""
        ...

    @abstractmethod
    def watch(self, uri: str | VirtualUri) -> Disposable:
        """Per-path watch registration (changes are broadcast to all subscribers)."""
        ...

    @abstractmethod
    def on_did_change_file(self, listener: ChangeListener) -> Disposable:
        """Subscribe to batched change events."""
        ...


__all__ = ["FileSystemProvider"]
