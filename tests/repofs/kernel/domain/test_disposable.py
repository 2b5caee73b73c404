"""Tests for Disposable."""

from repofs.kernel.domain.disposable import Disposable


def test_dispose_runs_callback_once():
    calls = []
    handle = Disposable(lambda: calls.append("x"))

    handle.dispose()
    handle.dispose()

    assert calls == ["x"]
    assert handle.disposed


def test_without_callback():
    handle = Disposable()
    handle.dispose()
    assert handle.disposed


def test_context_manager_disposes():
    calls = []
    with Disposable(lambda: calls.append("x")) as handle:
        assert not handle.disposed
    assert calls == ["x"]
