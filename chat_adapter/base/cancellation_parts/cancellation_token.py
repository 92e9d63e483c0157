"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class used by streaming calls. A token is
polled between transport reads, and can also run registered callbacks at
cancel time so an open transport is closed even while the consuming loop is
blocked on a read.
"""

from __future__ import annotations

from contextlib import suppress
from threading import Lock
from typing import Callable, List

from .state import State
from .cancelled_error import CancelledError

CancelCallback = Callable[[], None]


class CancellationToken:
    """A cooperative cancellation token with cancel-time callbacks.

    Thread-safe: a UI thread may cancel a call whose stream is consumed on
    another thread. Callbacks run exactly once, on the cancelling thread, and
    are best-effort (a failing callback never prevents the others).
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._callbacks: List[CancelCallback] = []
        if parent is not None:
            parent.add_callback(lambda: self.cancel(parent.reason))

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation and fire registered callbacks. Idempotent."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            with suppress(Exception):
                cb()

    def add_callback(self, callback: CancelCallback) -> None:
        """Register ``callback`` to run on cancel (immediately if already cancelled)."""
        with self._lock:
            if not self._state.cancelled:
                self._callbacks.append(callback)
                return
        with suppress(Exception):
            callback()

    def remove_callback(self, callback: CancelCallback) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        with self._lock, suppress(ValueError):
            self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def child(self) -> "CancellationToken":
        """Create a token that is cancelled whenever this one is."""
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, callbacks={len(self._callbacks)})"
        )


__all__ = ["CancellationToken", "CancelCallback"]
