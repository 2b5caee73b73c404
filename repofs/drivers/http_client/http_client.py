"""HTTP client driver using httpx.AsyncClient.

Used by the content API driver for directory listings (JSON) and raw file
downloads (bytes). One pooled client is created lazily and shared by every
request until :meth:`HttpClientDriver.aclose`.
"""

from __future__ import annotations

from typing import Any

import httpx

from repofs.kernel.exceptions import HttpClientError
from repofs.kernel.logging import get_logger

logger = get_logger(__name__)


class HttpClientDriver:
    """Async HTTP access with connection pooling and default headers.

    Parameters
    ----------
    timeout : float
        Request timeout in seconds (default: 30.0).
    headers : dict[str, str] | None
        Headers included in every request.
    follow_redirects : bool
        Whether to follow HTTP redirects (default: True). Raw download
        locators commonly redirect.
    raise_for_status : bool
        If True, raise :class:`HttpClientError` on non-2xx responses
        (default: True).

    Examples
    --------
    Basic usage::

        http = HttpClientDriver(headers={"Accept": "application/vnd.github+json"})
        result = await http.aget("https://api.github.com/repos/o/r/contents/")
        print(result["body"])
        data = await http.aget_bytes("https://raw.githubusercontent.com/o/r/main/README.md")
    """

    def __init__(
        self,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        follow_redirects: bool = True,
        raise_for_status: bool = True,
    ) -> None:
        self._timeout = timeout
        self._default_headers = dict(headers) if headers else {}
        self._follow_redirects = follow_redirects
        self._raise_for_status = raise_for_status
        self._client: httpx.AsyncClient | None = None
        # Hook for testing — inject a custom transport
        self._transport: httpx.AsyncBaseTransport | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily create the httpx client on first use."""
        if self._client is None:
            kwargs: dict[str, Any] = {
                "timeout": self._timeout,
                "headers": self._default_headers,
                "follow_redirects": self._follow_redirects,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    def _parse_response(self, response: httpx.Response) -> dict[str, Any]:
        """Parse an httpx response into a standard dict.

        Returns
        -------
        dict[str, Any]
            ``{"status_code": int, "headers": dict, "body": Any}``
            where body is parsed JSON if content-type is JSON, else raw text.
        """
        content_type = response.headers.get("content-type", "")
        if "json" in content_type:
            try:
                body = response.json()
            except ValueError:
                body = response.text
        else:
            body = response.text

        return {
            "status_code": response.status_code,
            "headers": dict(response.headers),
            "body": body,
        }

    def _check_status(self, response: httpx.Response, body: Any) -> None:
        """Raise HttpClientError if status is non-2xx and raise_for_status is enabled."""
        status = response.status_code
        if self._raise_for_status and not 200 <= status < 300:
            raise HttpClientError(
                status_code=status,
                body=body,
                message=f"HTTP {status}: {response.text}",
                text=response.text,
            )

    async def aget(self, url: str) -> dict[str, Any]:
        """Make an async GET request.

        Returns
        -------
        dict[str, Any]
            ``{"status_code": int, "headers": dict, "body": Any}``

        Raises
        ------
        HttpClientError
            On a non-2xx status; ``body`` holds the parsed body and ``text``
            the body as received.
        """
        logger.debug("GET {url}", url=url)
        response = await self._get_client().get(url)
        result = self._parse_response(response)
        self._check_status(response, result["body"])
        return result

    async def aget_bytes(self, url: str) -> bytes:
        """GET ``url`` and return the raw response body.

        Raises
        ------
        HttpClientError
            On a non-2xx status; ``body`` and ``text`` hold the response text.
        """
        logger.debug("GET {url} (raw)", url=url)
        response = await self._get_client().get(url)
        self._check_status(response, response.text)
        return response.content

    async def aclose(self) -> None:
        """Close the underlying httpx client and release connection pool resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["HttpClientDriver", "HttpClientError"]
