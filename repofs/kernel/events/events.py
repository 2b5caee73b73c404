"""Change event data classes for the tree cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from repofs.kernel.domain.uri import VirtualUri


class FileChangeType(StrEnum):
    """Kind of cache mutation."""

    CHANGED = "changed"
    CREATED = "created"


@dataclass(slots=True, frozen=True)
class FileChangeEvent:
    """One cache mutation at ``uri``."""

    type: FileChangeType
    uri: VirtualUri
    timestamp: datetime = field(default_factory=datetime.now, compare=False)


def changed(uri: VirtualUri) -> FileChangeEvent:
    return FileChangeEvent(FileChangeType.CHANGED, uri)


def created(uri: VirtualUri) -> FileChangeEvent:
    return FileChangeEvent(FileChangeType.CREATED, uri)


__all__ = ["FileChangeEvent", "FileChangeType", "changed", "created"]
