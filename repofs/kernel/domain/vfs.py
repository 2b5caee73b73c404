"""Domain models returned by the host-facing file-system interface.

These models are what a host sees: the kind of an entry, its metadata, and
the shape of one item in a remote directory listing.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntryType(StrEnum):
    """Type of a tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


class FileStat(BaseModel):
    """Metadata about a cached path.

    Attributes
    ----------
    type : EntryType
        Whether this is a file or directory.
    ctime : float
        Creation time of the cache entry (POSIX seconds).
    mtime : float
        Last modification time of the cache entry (POSIX seconds).
    size : int
        Byte length for files (0 until fetched), child count for directories.
    """

    model_config = ConfigDict(frozen=True)

    type: EntryType
    ctime: float
    mtime: float
    size: int = 0


class RemoteItem(BaseModel):
    """One child returned by a remote directory listing.

    Built from the upstream JSON shape ``{type, name, path, download_url}``.
    ``"dir"`` maps to :attr:`EntryType.DIRECTORY`; any other upstream type
    (file, symlink, submodule) is exposed as a file.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    path: str
    kind: EntryType = Field(alias="type")
    download_url: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _map_upstream_type(cls, value: object) -> EntryType:
        if isinstance(value, EntryType):
            return value
        if value in ("dir", EntryType.DIRECTORY.value):
            return EntryType.DIRECTORY
        return EntryType.FILE

    @field_validator("path", mode="after")
    @classmethod
    def _strip_dot_prefix(cls, value: str) -> str:
        if value.startswith("./"):
            return value[2:]
        return value


__all__ = ["EntryType", "FileStat", "RemoteItem"]
