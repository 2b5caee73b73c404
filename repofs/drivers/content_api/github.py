"""GitHub-style content API driver.

Lists a directory with ``GET {api_base}/contents/{path}`` and downloads a
file from the ``download_url`` that the listing returned for it.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from repofs.drivers.http_client import HttpClientDriver
from repofs.kernel.domain.vfs import RemoteItem
from repofs.kernel.exceptions import HttpClientError, RemoteUnavailableError
from repofs.kernel.logging import get_logger
from repofs.kernel.utils.repo_url import contents_url, derive_api_base

logger = get_logger(__name__)


class GitHubContentAPI:
    """:class:`~repofs.kernel.ports.content_api.ContentAPI` over a GitHub-shaped REST API.

    Parameters
    ----------
    api_base : str
        API base for one repository, e.g. ``https://api.github.com/repos/o/r``.
    http_client : HttpClientDriver | None
        Shared HTTP driver. When omitted one is created and owned by this
        instance.
    timeout : float
        Timeout for an owned HTTP driver.
    headers : dict[str, str] | None
        Default headers for an owned HTTP driver.
    """

    def __init__(
        self,
        api_base: str,
        http_client: HttpClientDriver | None = None,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or HttpClientDriver(timeout=timeout, headers=headers)

    @classmethod
    def from_repo_url(cls, repo_url: str, **kwargs: Any) -> GitHubContentAPI:
        """Build a driver for the repository at web URL ``repo_url``."""
        return cls(derive_api_base(repo_url), **kwargs)

    @property
    def api_base(self) -> str:
        return self._api_base

    async def list_children(self, base_path: str) -> list[RemoteItem]:
        url = contents_url(self._api_base, base_path)
        try:
            result = await self._http.aget(url)
        except HttpClientError as e:
            raise RemoteUnavailableError(
                e.text or str(e), status_code=e.status_code, url=url
            ) from e
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(str(e) or type(e).__name__, url=url) from e

        body = result["body"]
        if not isinstance(body, list):
            # A path naming a file returns a single object instead of a list
            raise RemoteUnavailableError(
                f"expected a directory listing from {url}",
                status_code=result["status_code"],
                url=url,
            )
        try:
            items = [RemoteItem.model_validate(item) for item in body]
        except ValidationError as e:
            raise RemoteUnavailableError(f"malformed listing from {url}: {e}", url=url) from e

        logger.debug("Listed {count} item(s) under {path}", count=len(items), path=base_path or "/")
        return items

    async def fetch_content(self, download_url: str) -> bytes:
        try:
            data = await self._http.aget_bytes(download_url)
        except HttpClientError as e:
            raise RemoteUnavailableError(
                e.text or str(e), status_code=e.status_code, url=download_url
            ) from e
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(str(e) or type(e).__name__, url=download_url) from e

        logger.debug("Fetched {size} byte(s) from {url}", size=len(data), url=download_url)
        return data

    async def aclose(self) -> None:
        """Close the HTTP driver if this instance created it."""
        if self._owns_client:
            await self._http.aclose()


__all__ = ["GitHubContentAPI"]
