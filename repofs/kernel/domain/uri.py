"""Virtual URIs for paths served by a repofs provider.

Every path lives under a synthetic scheme (``gpfs`` by default) so a host
can tell provider paths apart from local ones. Paths are POSIX style.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

DEFAULT_SCHEME = "gpfs"


@dataclass(frozen=True, slots=True)
class VirtualUri:
    """A ``scheme:/path`` pair.

    Examples
    --------
    >>> uri = VirtualUri.parse("gpfs:/src/main.py")
    >>> uri.path
    '/src/main.py'
    >>> str(uri.parent)
    'gpfs:/src'
    """

    scheme: str
    path: str

    @classmethod
    def parse(cls, value: str | VirtualUri, default_scheme: str = DEFAULT_SCHEME) -> VirtualUri:
        """Parse ``scheme:/path`` or a bare ``/path``.

        A bare path takes ``default_scheme``. The path is made absolute and
        empty segments are dropped.
        """
        if isinstance(value, VirtualUri):
            return value

        scheme = default_scheme
        path = value
        head, sep, tail = value.partition(":")
        if sep and head and "/" not in head:
            scheme, path = head, tail

        # "/a//b/" names the same entry as "/a/b"
        path = "/" + "/".join(segment for segment in path.split("/") if segment)
        return cls(scheme=scheme, path=path)

    @classmethod
    def from_remote_path(cls, scheme: str, remote_path: str) -> VirtualUri:
        """Build a URI from a repository-relative path such as ``src/main.py``."""
        return cls(scheme=scheme, path="/" + remote_path.lstrip("/"))

    def with_path(self, path: str) -> VirtualUri:
        return VirtualUri(scheme=self.scheme, path=path)

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def parent(self) -> VirtualUri:
        return self.with_path(posixpath.dirname(self.path))

    def joinpath(self, name: str) -> VirtualUri:
        return self.with_path(posixpath.join(self.path, name))

    def __str__(self) -> str:
        return f"{self.scheme}:{self.path}"


__all__ = ["DEFAULT_SCHEME", "VirtualUri"]
