"""Content API port — remote listing and download of repository files.

Drivers
-------
- ``GitHubContentAPI`` — GitHub-style ``/contents/{path}`` REST API over httpx.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from repofs.kernel.domain.vfs import RemoteItem


@runtime_checkable
class ContentAPI(Protocol):
    """Stateless request/response access to a remote repository tree."""

    @abstractmethod
    async def list_children(self, base_path: str) -> list[RemoteItem]:
        """List the immediate children of a directory.

        Args
        ----
            base_path: Repository path of the directory (``/`` or ``""`` is the root).

        Returns
        -------
            Children in upstream order. Paths have any leading ``./`` removed.

        Raises
        ------
        RemoteUnavailableError
            If the upstream call does not succeed; carries the response text.
        """
        ...

    @abstractmethod
    async def fetch_content(self, download_url: str) -> bytes:
        """Download the full content of one file.

        Raises
        ------
        RemoteUnavailableError
            If the download does not succeed.
        """
        ...


__all__ = ["ContentAPI"]
