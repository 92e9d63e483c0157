"""Cancellable iterator facade over a provider stream.

Wraps the event generator of one streaming call together with the
``CancellationToken`` that generator watches. ``cancel()`` may be called from
any thread; the token's callbacks close the open transport so a blocked read
returns promptly.
"""
from __future__ import annotations

from contextlib import suppress
from typing import Iterator, Optional

from ..cancellation import CancellationToken, CancelledError
from ..models import AssembledResponse
from .streaming import ChatStreamEvent


class StreamController:
    """High-level handle on one streaming call.

    Responsibilities:
      * Iterate over ``ChatStreamEvent`` objects (single pass).
      * Expose ``cancel(reason)`` for cooperative cancellation.
      * Track the terminal event; ``result()`` turns it into a return value
        or a raised error.
    """

    def __init__(self, events: Iterator[ChatStreamEvent], token: CancellationToken) -> None:
        self._events = events
        self._token = token
        self._finished = False
        self._terminal_event: ChatStreamEvent | None = None

    def __iter__(self) -> Iterator[ChatStreamEvent]:
        for evt in self._events:
            if evt.finish:
                self._finished = True
                self._terminal_event = evt
            yield evt

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Safe to call repeatedly or after completion."""
        self._token.cancel(reason or "cancelled by caller")

    def close(self) -> None:
        """Abandon the stream without draining it; releases the transport."""
        self._token.cancel("stream closed")
        close = getattr(self._events, "close", None)
        if callable(close):
            with suppress(Exception):
                close()

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether the stream has emitted its terminal event."""
        return self._finished

    @property
    def terminal_event(self) -> ChatStreamEvent | None:  # noqa: D401 - short property
        """The captured terminal event once iteration has completed."""
        return self._terminal_event

    @property
    def error(self) -> Optional[BaseException]:
        return self._terminal_event.error if self._terminal_event else None

    def result(self) -> AssembledResponse:
        """Drain the remaining events and return the final response.

        Raises:
            ProviderError: the classified failure (with ``partial`` attached).
            CancelledError: when the call was cancelled.
        """
        if not self._finished:
            for _ in self:
                pass
        evt = self._terminal_event
        if evt is None:
            raise CancelledError(self._token.reason or "stream ended without a terminal event")
        if evt.error is not None:
            raise evt.error
        if evt.response is None:  # pragma: no cover - guarded by the provider
            raise CancelledError("stream finished without a response")
        return evt.response

    def __enter__(self) -> "StreamController":
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._finished:
            self.close()


__all__ = ["StreamController"]
