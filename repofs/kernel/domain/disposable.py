"""Handle returned by subscriptions and registrations."""

from __future__ import annotations

from collections.abc import Callable


class Disposable:
    """Runs a teardown callback at most once.

    Examples
    --------
    >>> calls = []
    >>> handle = Disposable(lambda: calls.append("bye"))
    >>> handle.dispose()
    >>> handle.dispose()
    >>> calls
    ['bye']
    """

    def __init__(self, on_dispose: Callable[[], None] | None = None) -> None:
        self._on_dispose = on_dispose
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._on_dispose is not None:
            self._on_dispose()

    def __enter__(self) -> Disposable:
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.dispose()


__all__ = ["Disposable"]
