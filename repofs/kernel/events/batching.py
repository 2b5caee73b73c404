"""Debounced batching of cache change events.

``ChangeNotifier`` buffers :class:`FileChangeEvent` objects and hands the
whole buffer to its subscribers once mutations have been quiet for a short
delay. The timer lives in :class:`DebounceScheduler` so the notifier only
deals with buffering and delivery.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from collections import Counter
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from repofs.kernel.domain.disposable import Disposable
from repofs.kernel.events.events import FileChangeEvent
from repofs.kernel.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DEBOUNCE_MS = 5.0

ChangeListener = Callable[[Sequence[FileChangeEvent]], Awaitable[None] | None]


class BatchFlushReason(StrEnum):
    """Reason codes for why a batch was delivered."""

    TIME = "time"
    MANUAL = "manual"


@dataclass(slots=True)
class BatchingMetrics:
    """Simple in-memory metrics tracked by the notifier."""

    event_batches_total: int = 0
    events_delivered_total: int = 0
    events_dropped_total: int = 0
    event_batch_flush_reason: Counter[str] = field(default_factory=Counter)


@dataclass(slots=True, frozen=True)
class ChangeBatch:
    """One delivered batch of change events."""

    batch_id: str
    sequence_no: int
    created_at: datetime
    events: tuple[FileChangeEvent, ...]
    flush_reason: BatchFlushReason


class DebounceScheduler:
    """Re-armable one-shot timer on the running event loop.

    Every :meth:`schedule` call pushes the deadline back by ``delay``
    seconds. Without a running loop nothing can fire on its own: the
    scheduler stays armed until :meth:`flush`.
    """

    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self._callback = callback
        self._delay = max(delay, 0.0)
        self._handle: asyncio.TimerHandle | None = None
        self._held = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None or self._held

    def schedule(self) -> None:
        """(Re)arm the timer."""
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; holding until flush")
            self._held = True
            return
        self._handle = loop.call_later(self._delay, self._fire)

    def flush(self) -> None:
        """Fire now if armed."""
        if not self.pending:
            return
        self.cancel()
        self._callback()

    def cancel(self) -> None:
        self._held = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class ChangeNotifier:
    """Collects change events and delivers them to subscribers in batches.

    Outside a running event loop events are held until :meth:`flush`.

    Parameters
    ----------
    debounce_ms : float
        Quiet period after the last event before the batch is delivered.

    Examples
    --------
    Example usage::

        notifier = ChangeNotifier(debounce_ms=5)
        notifier.subscribe(lambda events: print(len(events)))
        notifier.fire_soon(created(uri_a), created(uri_b))
        # ~5 ms later the listener receives both events in one call
    """

    def __init__(self, debounce_ms: float = DEFAULT_DEBOUNCE_MS) -> None:
        self._buffer: list[FileChangeEvent] = []
        self._buffer_opened_at: datetime | None = None
        self._listeners: dict[str, ChangeListener] = {}
        self._scheduler = DebounceScheduler(self._on_timer, debounce_ms / 1000.0)
        self._metrics = BatchingMetrics()
        self._sequence = 0
        self._closed = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def metrics(self) -> BatchingMetrics:
        return self._metrics

    @property
    def has_pending_events(self) -> bool:
        return bool(self._buffer)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: ChangeListener) -> Disposable:
        """Register a sync or async listener; dispose the handle to unsubscribe."""
        listener_id = uuid.uuid4().hex
        self._listeners[listener_id] = listener
        return Disposable(lambda: self._listeners.pop(listener_id, None))

    def __len__(self) -> int:
        return len(self._listeners)

    def fire_soon(self, *events: FileChangeEvent) -> None:
        """Buffer ``events`` and re-arm the debounce timer."""
        if not events:
            return
        if self._closed:
            self._metrics.events_dropped_total += len(events)
            return
        if self._buffer_opened_at is None:
            self._buffer_opened_at = datetime.now(tz=UTC)
        self._buffer.extend(events)
        self._scheduler.schedule()

    def flush(self) -> None:
        """Deliver pending events now instead of waiting for the timer."""
        self._scheduler.cancel()
        self._deliver(BatchFlushReason.MANUAL)

    def close(self) -> None:
        """Tear down: cancel the timer, drop pending events and listeners."""
        self._closed = True
        self._scheduler.cancel()
        if self._buffer:
            self._metrics.events_dropped_total += len(self._buffer)
            logger.debug(
                "Dropping {count} pending change event(s) on close", count=len(self._buffer)
            )
        self._buffer.clear()
        self._buffer_opened_at = None
        self._listeners.clear()

    # Internal helpers -------------------------------------------------

    def _on_timer(self) -> None:
        self._deliver(BatchFlushReason.TIME)

    def _deliver(self, reason: BatchFlushReason) -> None:
        if self._closed or not self._buffer:
            return

        self._sequence += 1
        batch = ChangeBatch(
            batch_id=uuid.uuid4().hex,
            sequence_no=self._sequence,
            created_at=self._buffer_opened_at or datetime.now(tz=UTC),
            events=tuple(self._buffer),
            flush_reason=reason,
        )
        self._buffer.clear()
        self._buffer_opened_at = None
        self._record_batch(batch)

        for listener in list(self._listeners.values()):
            self._invoke(listener, batch)

    def _invoke(self, listener: ChangeListener, batch: ChangeBatch) -> None:
        name = getattr(listener, "__name__", listener.__class__.__name__)
        try:
            result = listener(batch.events)
        except Exception as exc:
            logger.warning("Change listener {name} failed: {error}", name=name, error=exc)
            return

        if not inspect.isawaitable(result):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._await_listener(name, result))
            return
        task = loop.create_task(self._await_listener(name, result))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _await_listener(self, name: str, result: Awaitable[None]) -> None:
        try:
            await result
        except Exception as exc:
            logger.warning("Change listener {name} failed: {error}", name=name, error=exc)

    def _record_batch(self, batch: ChangeBatch) -> None:
        self._metrics.event_batches_total += 1
        self._metrics.events_delivered_total += len(batch.events)
        self._metrics.event_batch_flush_reason[batch.flush_reason.value] += 1
        logger.debug(
            "Flushing batch {batch_id} (seq={seq}, size={size}, reason={reason})",
            batch_id=batch.batch_id,
            seq=batch.sequence_no,
            size=len(batch.events),
            reason=batch.flush_reason.value,
        )


__all__ = [
    "BatchFlushReason",
    "BatchingMetrics",
    "ChangeBatch",
    "ChangeListener",
    "ChangeNotifier",
    "DebounceScheduler",
    "DEFAULT_DEBOUNCE_MS",
]
