"""Derivation of content API URLs from a repository URL."""

from __future__ import annotations

from urllib.parse import urlsplit

from repofs.kernel.exceptions import ConfigurationError


def strip_slash(value: str) -> str:
    """Remove one leading and one trailing ``/``.

    >>> strip_slash("/owner/repo/")
    'owner/repo'
    """
    if value.startswith("/"):
        value = value[1:]
    if value.endswith("/"):
        value = value[:-1]
    return value


def derive_api_base(repo_url: str) -> str:
    """Map a repository web URL to its REST API base.

    >>> derive_api_base("https://github.com/owner/repo")
    'https://api.github.com/repos/owner/repo'

    Raises
    ------
    ConfigurationError
        If the URL has no scheme, host or repository path.
    """
    parts = urlsplit(repo_url.strip())
    if not parts.scheme or not parts.hostname:
        raise ConfigurationError("repo_url", f"not an absolute URL: {repo_url!r}")
    repo_path = strip_slash(parts.path)
    if not repo_path:
        raise ConfigurationError("repo_url", f"no repository path in {repo_url!r}")
    return f"{parts.scheme}://api.{strip_slash(parts.hostname)}/repos/{repo_path}"


def contents_url(api_base: str, path: str) -> str:
    """Build the listing URL for a repository path.

    >>> contents_url("https://api.github.com/repos/o/r", "/src")
    'https://api.github.com/repos/o/r/contents/src'
    """
    return f"{api_base}/contents/{strip_slash(path)}"


__all__ = ["contents_url", "derive_api_base", "strip_slash"]
