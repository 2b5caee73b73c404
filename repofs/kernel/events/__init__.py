"""Change events and their debounced delivery."""

from repofs.kernel.events.batching import (
    BatchFlushReason,
    BatchingMetrics,
    ChangeBatch,
    ChangeListener,
    ChangeNotifier,
    DebounceScheduler,
)
from repofs.kernel.events.events import FileChangeEvent, FileChangeType

__all__ = [
    "BatchFlushReason",
    "BatchingMetrics",
    "ChangeBatch",
    "ChangeListener",
    "ChangeNotifier",
    "DebounceScheduler",
    "FileChangeEvent",
    "FileChangeType",
]
