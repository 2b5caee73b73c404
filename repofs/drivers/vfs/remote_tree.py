"""Lazily populated mirror of a remote repository tree.

:class:`RemoteTreeProvider` answers host requests from its
:class:`~repofs.kernel.domain.tree.TreeCache` and fills the cache from a
:class:`~repofs.kernel.ports.content_api.ContentAPI` the first time a
directory is listed or a file is read. Every cache mutation is reported
through a debounced :class:`~repofs.kernel.events.batching.ChangeNotifier`.

Example
-------
.. code-block:: python

    api = GitHubContentAPI.from_repo_url("https://github.com/owner/repo")
    provider = RemoteTreeProvider(api)

    entries = await provider.read_directory("gpfs:/")
    readme = await provider.read_file("gpfs:/README.md")
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, TypeVar

from repofs.kernel.domain.disposable import Disposable
from repofs.kernel.domain.tree import DirectoryNode, FileNode, TreeCache
from repofs.kernel.domain.uri import DEFAULT_SCHEME, VirtualUri
from repofs.kernel.domain.vfs import EntryType, FileStat
from repofs.kernel.events.batching import ChangeNotifier
from repofs.kernel.events.events import changed, created
from repofs.kernel.exceptions import (
    EntryExistsError,
    EntryIsADirectoryError,
    EntryNotFoundError,
    NoPermissionsError,
    RemoteUnavailableError,
)
from repofs.kernel.logging import get_logger
from repofs.kernel.lookup import lookup, lookup_directory, lookup_file, lookup_parent_directory

if TYPE_CHECKING:
    from repofs.kernel.domain.vfs import RemoteItem
    from repofs.kernel.events.batching import ChangeListener
    from repofs.kernel.ports.content_api import ContentAPI

logger = get_logger(__name__)

T = TypeVar("T")

ErrorReporter = Callable[[RemoteUnavailableError], None]


def _log_remote_error(error: RemoteUnavailableError) -> None:
    logger.error("Remote request failed: {message}", message=error.message)


class RemoteTreeProvider:
    """:class:`~repofs.kernel.ports.vfs.FileSystemProvider` backed by a remote content API.

    Directories are listed once, on first access, and files are downloaded
    once, on first read. Nothing is ever evicted. Mutations are refused
    unless they come from population (``internal=True``).

    Concurrent requests for the same unpopulated directory, or the same
    unfetched file, share one remote call. If it fails, every waiter gets the
    error and the next access tries again.

    Parameters
    ----------
    content_api : ContentAPI
        Remote listing and download access.
    scheme : str
        URI scheme for bare paths and emitted events.
    notifier : ChangeNotifier | None
        Change event batcher; a default 5 ms notifier is created if omitted.
    tree : TreeCache | None
        Cache to populate; a fresh one is created if omitted.
    error_reporter : ErrorReporter | None
        Called with each remote failure before it is re-raised. Defaults to
        logging at ERROR.
    """

    def __init__(
        self,
        content_api: ContentAPI,
        *,
        scheme: str = DEFAULT_SCHEME,
        notifier: ChangeNotifier | None = None,
        tree: TreeCache | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        self._content_api = content_api
        self._scheme = scheme
        self._notifier = notifier if notifier is not None else ChangeNotifier()
        self._tree = tree if tree is not None else TreeCache()
        self._report_error = error_reporter or _log_remote_error
        self._listings: dict[str, asyncio.Task[None]] = {}
        self._fetches: dict[str, asyncio.Task[bytes]] = {}

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def tree(self) -> TreeCache:
        return self._tree

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def _uri(self, uri: str | VirtualUri) -> VirtualUri:
        return VirtualUri.parse(uri, self._scheme)

    # Reads ------------------------------------------------------------

    def stat(self, uri: str | VirtualUri) -> FileStat:
        """Metadata of a cached entry; never touches the network."""
        return lookup(self._tree, self._uri(uri)).to_stat()

    async def read_directory(self, uri: str | VirtualUri) -> list[tuple[str, EntryType]]:
        """List a directory, populating it from the remote on first access.

        Raises
        ------
        EntryNotADirectoryError
            If the path (or one of its segments) names a file.
        EntryNotFoundError
            If the path does not exist in the remote listing of its parent.
        RemoteUnavailableError
            If a listing was needed and failed.
        """
        target = self._uri(uri)
        directory = lookup_directory(self._tree, target, silent=True)
        if directory is None or not directory.is_populated:
            await self._coalesce(
                self._listings, target.path, lambda: self._populate_directory(target)
            )
            directory = lookup_directory(self._tree, target)
        return [(name, child.kind) for name, child in directory.children.items()]

    async def read_file(self, uri: str | VirtualUri) -> bytes:
        """Return a file's content, downloading it on first read.

        Raises
        ------
        EntryIsADirectoryError
            If the path names a directory.
        EntryNotFoundError
            If the path is not cached, or the file has no download locator.
        RemoteUnavailableError
            If the download failed.
        """
        target = self._uri(uri)
        file = lookup_file(self._tree, target)
        if file.data is not None:
            return file.data
        download_url = file.download_url
        if download_url is None:
            raise EntryNotFoundError(target, "no content available")
        return await self._coalesce(
            self._fetches, target.path, lambda: self._fetch_content(target, download_url)
        )

    # Mutations (population only) --------------------------------------

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
        """Create or replace a file in the cache.

        ``content=None`` leaves the file deferred; it is downloaded from
        ``download_url`` on first read.

        Raises
        ------
        NoPermissionsError
            Unless ``internal`` is set.
        EntryIsADirectoryError
            If a directory has the target name.
        EntryNotFoundError
            If the parent is missing, or the file is missing and ``create`` is false.
        EntryExistsError
            If the file exists, ``create`` is set and ``overwrite`` is not.
        """
        target = self._uri(uri)
        if not internal:
            raise NoPermissionsError(target)
        if target.path == "/":
            raise EntryIsADirectoryError(target)

        parent = lookup_parent_directory(self._tree, target)
        match parent.children.get(target.name):
            case DirectoryNode():
                raise EntryIsADirectoryError(target)
            case None if not create:
                raise EntryNotFoundError(target)
            case FileNode() if create and not overwrite:
                raise EntryExistsError(target)
            case FileNode() as existing:
                existing.set_content(content)
                if download_url is not None:
                    existing.download_url = download_url
                self._notifier.fire_soon(changed(target))
            case None:
                entry = FileNode(name=target.name, download_url=download_url)
                entry.set_content(content)
                parent.add_child(entry)
                self._notifier.fire_soon(created(target))

    def create_directory(self, uri: str | VirtualUri, *, internal: bool = False) -> None:
        """Insert an empty directory into the cache.

        An existing directory of the same name is left as it is.

        Raises
        ------
        NoPermissionsError
            Unless ``internal`` is set.
        EntryNotFoundError
            If the parent directory is not cached.
        EntryExistsError
            If a file has the target name.
        """
        target = self._uri(uri)
        if not internal:
            raise NoPermissionsError(target)
        if target.path == "/":
            return

        parent = lookup_parent_directory(self._tree, target)
        match parent.children.get(target.name):
            case DirectoryNode():
                return
            case FileNode():
                raise EntryExistsError(target)
            case None:
                parent.add_child(DirectoryNode(name=target.name))
                self._notifier.fire_soon(changed(target.parent), created(target))

    def rename(
        self, old_uri: str | VirtualUri, new_uri: str | VirtualUri, *, overwrite: bool = False
    ) -> None:
        raise NoPermissionsError(self._uri(old_uri), "rename is not supported")

    def delete(self, uri: str | VirtualUri, *, recursive: bool = False) -> None:
        raise NoPermissionsError(self._uri(uri), "delete is not supported")

    # Change events ----------------------------------------------------

    def watch(self, uri: str | VirtualUri) -> Disposable:
        # every change is broadcast through on_did_change_file
        return Disposable()

    def on_did_change_file(self, listener: ChangeListener) -> Disposable:
        return self._notifier.subscribe(listener)

    async def aclose(self) -> None:
        """Stop change delivery, cancel in-flight requests and close the content API."""
        self._notifier.close()
        for task in [*self._listings.values(), *self._fetches.values()]:
            task.cancel()
        self._listings.clear()
        self._fetches.clear()
        close = getattr(self._content_api, "aclose", None)
        if close is not None:
            await close()

    # Population -------------------------------------------------------

    async def _coalesce(
        self,
        in_flight: dict[str, asyncio.Task[T]],
        key: str,
        factory: Callable[[], Coroutine[Any, Any, T]],
    ) -> T:
        task = in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._run_once(in_flight, key, factory()))
            in_flight[key] = task
        else:
            logger.debug("Joining in-flight request for {path}", path=key)
        return await asyncio.shield(task)

    @staticmethod
    async def _run_once(
        in_flight: dict[str, asyncio.Task[T]], key: str, work: Coroutine[Any, Any, T]
    ) -> T:
        try:
            return await work
        finally:
            in_flight.pop(key, None)

    async def _populate_directory(self, target: VirtualUri) -> None:
        if target.path != "/" and lookup(self._tree, target, silent=True) is None:
            await self._ensure_parent_listed(target)
            # raises EntryNotFoundError if the parent's listing lacks it
            directory = lookup_directory(self._tree, target)
            if directory.is_populated:
                return

        try:
            items = await self._content_api.list_children(target.path)
        except RemoteUnavailableError as e:
            self._report_error(e)
            raise

        for item in items:
            self._insert_item(item)
        logger.debug("Populated {uri} with {count} entries", uri=target, count=len(items))

    async def _ensure_parent_listed(self, target: VirtualUri) -> None:
        parent_uri = target.parent
        parent = lookup_directory(self._tree, parent_uri, silent=True)
        if parent is None or not parent.is_populated:
            await self._coalesce(
                self._listings, parent_uri.path, lambda: self._populate_directory(parent_uri)
            )

    def _insert_item(self, item: RemoteItem) -> None:
        uri = VirtualUri.from_remote_path(self._scheme, item.path)
        match item.kind:
            case EntryType.DIRECTORY:
                self.create_directory(uri, internal=True)
            case EntryType.FILE:
                self.write_file(
                    uri,
                    None,
                    create=True,
                    overwrite=True,
                    internal=True,
                    download_url=item.download_url,
                )

    async def _fetch_content(self, target: VirtualUri, download_url: str) -> bytes:
        try:
            content = await self._content_api.fetch_content(download_url)
        except RemoteUnavailableError as e:
            self._report_error(e)
            raise

        self.write_file(target, content, create=True, overwrite=True, internal=True)
        logger.debug("Fetched {size} byte(s) for {uri}", size=len(content), uri=target)
        return content


__all__ = ["ErrorReporter", "RemoteTreeProvider"]
