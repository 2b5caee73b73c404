"""Wiring of a repository session from configuration.

Usage::

    from repofs.api.session import open_repository

    provider = open_repository("https://github.com/owner/repo")
    try:
        entries = await provider.read_directory("/")
    finally:
        await provider.aclose()
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from repofs.drivers.content_api import GitHubContentAPI
from repofs.drivers.vfs.remote_tree import ErrorReporter, RemoteTreeProvider
from repofs.kernel.config.loader import load_config
from repofs.kernel.events.batching import ChangeNotifier
from repofs.kernel.exceptions import ConfigurationError
from repofs.kernel.logging import get_logger
from repofs.kernel.utils.repo_url import derive_api_base

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from repofs.kernel.config.models import RepoFSConfig
    from repofs.kernel.ports.content_api import ContentAPI

logger = get_logger(__name__)


def open_repository(
    repo_url: str | None = None,
    *,
    config: RepoFSConfig | None = None,
    content_api: ContentAPI | None = None,
    error_reporter: ErrorReporter | None = None,
) -> RemoteTreeProvider:
    """Create a provider for one remote repository.

    The content API base is derived from the repository URL here, once, and
    handed to the loader.

    Parameters
    ----------
    repo_url : str | None
        Repository web URL. Falls back to ``config.repo_url``.
    config : RepoFSConfig | None
        Settings; loaded from the usual TOML locations when omitted.
    content_api : ContentAPI | None
        Use this loader instead of building a GitHub one from ``repo_url``.
    error_reporter : ErrorReporter | None
        Receives remote failures before they are raised to the caller.

    Raises
    ------
    ConfigurationError
        If no repository URL is available or it cannot be mapped to an API base.
    """
    config = config if config is not None else load_config()

    if content_api is None:
        url = repo_url or config.repo_url
        if not url:
            raise ConfigurationError("repo_url", "no repository URL given or configured")
        api_base = derive_api_base(url)
        logger.debug("Opening repository {url} via {api_base}", url=url, api_base=api_base)
        content_api = GitHubContentAPI(
            api_base, timeout=config.remote.timeout, headers=config.remote.headers
        )

    return RemoteTreeProvider(
        content_api,
        scheme=config.scheme,
        notifier=ChangeNotifier(debounce_ms=config.notifier.debounce_ms),
        error_reporter=error_reporter,
    )


@asynccontextmanager
async def repository_session(
    repo_url: str | None = None,
    *,
    config: RepoFSConfig | None = None,
    content_api: ContentAPI | None = None,
    error_reporter: ErrorReporter | None = None,
) -> AsyncIterator[RemoteTreeProvider]:
    """:func:`open_repository` as an async context manager that closes the provider."""
    provider = open_repository(
        repo_url, config=config, content_api=content_api, error_reporter=error_reporter
    )
    try:
        yield provider
    finally:
        await provider.aclose()


__all__ = ["open_repository", "repository_session"]
