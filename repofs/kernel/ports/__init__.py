"""Port interfaces."""

from repofs.kernel.ports.content_api import ContentAPI
from repofs.kernel.ports.vfs import FileSystemProvider

__all__ = ["ContentAPI", "FileSystemProvider"]
