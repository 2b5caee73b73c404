"""repofs - lazy, read-only file tree over a hosted source repository.

Directories are listed and files downloaded from the remote content API the
first time they are accessed, then served from an in-memory cache.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("repofs")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from repofs.api.session import open_repository, repository_session
from repofs.drivers.content_api import GitHubContentAPI
from repofs.drivers.vfs import FileSystemRegistry, RemoteTreeProvider
from repofs.kernel.domain.uri import VirtualUri
from repofs.kernel.domain.vfs import EntryType, FileStat

__all__ = [
    "EntryType",
    "FileStat",
    "FileSystemRegistry",
    "GitHubContentAPI",
    "RemoteTreeProvider",
    "VirtualUri",
    "open_repository",
    "repository_session",
]
