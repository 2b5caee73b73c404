"""Tests for the change notifier and its debounce timer."""

import asyncio

import pytest

from repofs.kernel.domain.uri import VirtualUri
from repofs.kernel.events.batching import BatchFlushReason, ChangeNotifier, DebounceScheduler
from repofs.kernel.events.events import FileChangeType, changed, created

A = VirtualUri("gpfs", "/a")
B = VirtualUri("gpfs", "/b")


class BatchCollector:
    """Listener capturing each delivered batch."""

    def __init__(self) -> None:
        self.batches: list = []

    def __call__(self, events) -> None:
        self.batches.append(tuple(events))


@pytest.mark.asyncio
async def test_events_within_window_are_delivered_together():
    collector = BatchCollector()
    notifier = ChangeNotifier(debounce_ms=5)
    notifier.subscribe(collector)

    notifier.fire_soon(created(A))
    notifier.fire_soon(changed(B))
    assert collector.batches == []

    await asyncio.sleep(0.05)

    assert len(collector.batches) == 1
    assert [e.type for e in collector.batches[0]] == [
        FileChangeType.CREATED,
        FileChangeType.CHANGED,
    ]
    assert notifier.metrics.event_batches_total == 1
    assert notifier.metrics.events_delivered_total == 2
    assert notifier.metrics.event_batch_flush_reason[BatchFlushReason.TIME.value] == 1


@pytest.mark.asyncio
async def test_each_event_rearms_the_timer():
    collector = BatchCollector()
    notifier = ChangeNotifier(debounce_ms=60)
    notifier.subscribe(collector)

    for _ in range(4):
        notifier.fire_soon(created(A))
        await asyncio.sleep(0.01)
    assert collector.batches == []

    await asyncio.sleep(0.2)
    assert len(collector.batches) == 1
    assert len(collector.batches[0]) == 4


@pytest.mark.asyncio
async def test_separate_bursts_are_separate_batches():
    collector = BatchCollector()
    notifier = ChangeNotifier(debounce_ms=5)
    notifier.subscribe(collector)

    notifier.fire_soon(created(A))
    await asyncio.sleep(0.05)
    notifier.fire_soon(created(B))
    await asyncio.sleep(0.05)

    assert [len(batch) for batch in collector.batches] == [1, 1]


@pytest.mark.asyncio
async def test_all_listeners_receive_the_batch():
    first, second = BatchCollector(), BatchCollector()
    notifier = ChangeNotifier(debounce_ms=5)
    notifier.subscribe(first)
    notifier.subscribe(second)

    notifier.fire_soon(created(A))
    await asyncio.sleep(0.05)

    assert first.batches == second.batches
    assert len(first.batches) == 1


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    collector = BatchCollector()
    notifier = ChangeNotifier(debounce_ms=5)

    def broken(_events):
        raise RuntimeError("listener bug")

    notifier.subscribe(broken)
    notifier.subscribe(collector)

    notifier.fire_soon(created(A))
    await asyncio.sleep(0.05)

    assert len(collector.batches) == 1


@pytest.mark.asyncio
async def test_async_listener_is_awaited():
    received = []
    notifier = ChangeNotifier(debounce_ms=5)

    async def listener(events):
        await asyncio.sleep(0)
        received.extend(events)

    notifier.subscribe(listener)
    notifier.fire_soon(created(A), created(B))
    await asyncio.sleep(0.05)

    assert [e.uri for e in received] == [A, B]


@pytest.mark.asyncio
async def test_manual_flush_delivers_immediately():
    collector = BatchCollector()
    notifier = ChangeNotifier(debounce_ms=1000)
    notifier.subscribe(collector)

    notifier.fire_soon(created(A))
    notifier.flush()

    assert len(collector.batches) == 1
    assert not notifier.has_pending_events
    assert notifier.metrics.event_batch_flush_reason[BatchFlushReason.MANUAL.value] == 1


@pytest.mark.asyncio
async def test_close_drops_pending_events():
    collector = BatchCollector()
    notifier = ChangeNotifier(debounce_ms=5)
    notifier.subscribe(collector)

    notifier.fire_soon(created(A), created(B))
    notifier.close()
    await asyncio.sleep(0.05)

    assert collector.batches == []
    assert notifier.metrics.events_dropped_total == 2
    assert len(notifier) == 0


@pytest.mark.asyncio
async def test_events_after_close_are_dropped():
    notifier = ChangeNotifier(debounce_ms=5)
    notifier.close()

    notifier.fire_soon(created(A))

    assert not notifier.has_pending_events
    assert notifier.metrics.events_dropped_total == 1


def test_without_running_loop_events_wait_for_flush():
    collector = BatchCollector()
    notifier = ChangeNotifier()
    notifier.subscribe(collector)

    notifier.fire_soon(created(A))
    notifier.fire_soon(changed(B))
    assert collector.batches == []
    assert notifier.has_pending_events

    notifier.flush()

    assert collector.batches == [(created(A), changed(B))]


def test_unsubscribe_via_disposable():
    collector = BatchCollector()
    notifier = ChangeNotifier()
    handle = notifier.subscribe(collector)
    assert len(notifier) == 1

    handle.dispose()
    notifier.fire_soon(created(A))

    assert len(notifier) == 0
    assert collector.batches == []


class TestDebounceScheduler:
    @pytest.mark.asyncio
    async def test_fires_once_after_delay(self):
        calls = []
        scheduler = DebounceScheduler(lambda: calls.append(1), 0.005)

        scheduler.schedule()
        scheduler.schedule()
        assert scheduler.pending
        await asyncio.sleep(0.05)

        assert calls == [1]
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self):
        calls = []
        scheduler = DebounceScheduler(lambda: calls.append(1), 0.005)

        scheduler.schedule()
        scheduler.cancel()
        await asyncio.sleep(0.05)

        assert calls == []

    @pytest.mark.asyncio
    async def test_flush_fires_only_when_armed(self):
        calls = []
        scheduler = DebounceScheduler(lambda: calls.append(1), 10)

        scheduler.flush()
        assert calls == []

        scheduler.schedule()
        scheduler.flush()
        assert calls == [1]
        assert not scheduler.pending

    def test_without_running_loop_stays_armed_until_flush(self):
        calls = []
        scheduler = DebounceScheduler(lambda: calls.append(1), 0)

        scheduler.schedule()
        assert calls == []
        assert scheduler.pending

        scheduler.flush()
        assert calls == [1]
        assert not scheduler.pending

    def test_cancel_drops_held_callback(self):
        calls = []
        scheduler = DebounceScheduler(lambda: calls.append(1), 0)

        scheduler.schedule()
        scheduler.cancel()
        scheduler.flush()

        assert calls == []

    def test_negative_delay_is_clamped(self):
        scheduler = DebounceScheduler(lambda: None, -1)
        assert scheduler.delay == 0.0
