"""Core exception hierarchy for repofs.

All repofs exceptions inherit from :class:`RepoFSError`. The file-system
conditions also inherit from the matching builtin ``OSError`` subclass so
host code written against plain Python file APIs keeps working.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class RepoFSError(Exception):
    """Base exception for all repofs errors.

    Catch this to handle every repofs-specific failure.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(RepoFSError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("repo_url", "missing scheme")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the setting or component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


# ============================================================================
# File System Errors
# ============================================================================


class FileSystemError(RepoFSError):
    """Raised when a file-system operation on the tree cache fails.

    Examples
    --------
    Example usage::

        raise EntryNotFoundError("gpfs:/src/main.py")
    """

    default_reason = "file system error"

    def __init__(self, uri: object, reason: str | None = None) -> None:
        """Initialize file-system error.

        Args
        ----
            uri: The virtual URI (or path) that caused the error
            reason: Explanation of what went wrong
        """
        self.uri = str(uri)
        self.reason = reason or self.default_reason
        super().__init__(f"{self.reason}: '{self.uri}'")


class EntryNotFoundError(FileSystemError, FileNotFoundError):
    """No entry exists at the given path."""

    default_reason = "entry not found"


class EntryNotADirectoryError(FileSystemError, NotADirectoryError):
    """A path segment or target resolved to a file where a directory was required."""

    default_reason = "not a directory"


class EntryIsADirectoryError(FileSystemError, IsADirectoryError):
    """The target resolved to a directory where a file was required."""

    default_reason = "is a directory"


class EntryExistsError(FileSystemError, FileExistsError):
    """Create-without-overwrite collided with an existing entry."""

    default_reason = "entry already exists"


class NoPermissionsError(FileSystemError, PermissionError):
    """Mutation attempted outside cache population, or rename/delete."""

    default_reason = "no permissions"


# ============================================================================
# Driver Errors
# ============================================================================


class HttpClientError(RepoFSError):
    """Raised when an HTTP request fails with a non-2xx status code.

    Attributes
    ----------
    status_code : int
        The HTTP status code.
    body : Any
        The response body (parsed JSON where the response was JSON).
    text : str
        The response body exactly as received.
    """

    def __init__(
        self, status_code: int, body: object, message: str = "", *, text: str = ""
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.text = text
        super().__init__(message or f"HTTP {status_code}")


class RemoteUnavailableError(RepoFSError):
    """Raised when the remote content API cannot satisfy a listing or fetch.

    The message is the upstream error text (usually the response body) so it
    can be shown to the user unchanged.

    Examples
    --------
    Example usage::

        raise RemoteUnavailableError('{"message": "Not Found"}', status_code=404)
    """

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


__all__ = [
    # Base
    "RepoFSError",
    # Configuration
    "ConfigurationError",
    # File system
    "FileSystemError",
    "EntryNotFoundError",
    "EntryNotADirectoryError",
    "EntryIsADirectoryError",
    "EntryExistsError",
    "NoPermissionsError",
    # Drivers
    "HttpClientError",
    "RemoteUnavailableError",
]
