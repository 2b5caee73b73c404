"""Path-based browsing helpers shared by the CLI and embedding hosts.

A provider only knows about paths whose parent has been listed. These
helpers list the parent first, so any repository path can be addressed
directly::

    from repofs.api import browse

    info = await browse.stat_path(provider, "/src/repofs/cli/main.py")
"""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING, Any

from repofs.kernel.domain.vfs import EntryType

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from repofs.kernel.ports.vfs import FileSystemProvider


def _normalize(path: str) -> str:
    path = "/" + path.strip("/")
    return posixpath.normpath(path) if path != "/" else path


async def _ensure_parent_listed(provider: FileSystemProvider, path: str) -> None:
    if path != "/":
        await provider.read_directory(posixpath.dirname(path))


async def list_path(provider: FileSystemProvider, path: str = "/") -> list[dict[str, Any]]:
    """List a directory.

    Returns
    -------
        List of entry dicts with ``name``, ``type`` and ``path``.
    """
    path = _normalize(path)
    entries = await provider.read_directory(path)
    return [
        {"name": name, "type": kind, "path": posixpath.join(path, name)} for name, kind in entries
    ]


async def stat_path(provider: FileSystemProvider, path: str) -> dict[str, Any]:
    """Metadata for any repository path, listing its parent if needed."""
    path = _normalize(path)
    await _ensure_parent_listed(provider, path)
    return {"path": path, **provider.stat(path).model_dump()}


async def read_path(provider: FileSystemProvider, path: str) -> bytes:
    """Content of any repository file, listing its parent if needed."""
    path = _normalize(path)
    await _ensure_parent_listed(provider, path)
    return await provider.read_file(path)


async def walk(
    provider: FileSystemProvider, path: str = "/", *, max_depth: int | None = None
) -> AsyncIterator[tuple[int, str, EntryType]]:
    """Yield ``(depth, path, kind)`` depth-first, in listing order.

    Every directory visited is listed, so walking a large tree without
    ``max_depth`` issues one request per directory.
    """
    root = _normalize(path)

    async def visit(directory: str, depth: int) -> AsyncIterator[tuple[int, str, EntryType]]:
        for name, kind in await provider.read_directory(directory):
            child = posixpath.join(directory, name)
            yield depth, child, kind
            if kind is EntryType.DIRECTORY and (max_depth is None or depth + 1 < max_depth):
                async for item in visit(child, depth + 1):
                    yield item

    async for item in visit(root, 0):
        yield item


__all__ = ["list_path", "read_path", "stat_path", "walk"]
