"""Anthropic stream decoder: an explicit state machine over SSE events.

States::

    IDLE --open()--> OPEN --first event--> RECEIVING --message_stop--> CLOSED
                       \\                     \\
                        +---- error event / protocol violation / disconnect --> FAILED

``feed`` folds one vendor event into the accumulator and returns the
immutable caller events it produced, in arrival order. Any protocol violation
raises ``ProtocolError`` and leaves the decoder in ``FAILED``; a vendor
``error`` event moves to ``FAILED`` without raising, with the classified
error available as :attr:`StreamDecoder.error`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..base.errors import ProtocolError, ProviderError, TransportError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import AssembledResponse
from ..base.streaming import (
    BLOCK_STOP,
    TEXT_DELTA,
    TOOL_ARGUMENTS_DELTA,
    TOOL_USE_START,
    ChatStreamEvent,
)
from .accumulator import BlockKind, BlockUnderConstruction, StreamAccumulator
from .assembler import assemble
from .error_mapping import classify_vendor_error

PROVIDER = "anthropic"


class DecoderState(str, Enum):
    IDLE = "idle"
    OPEN = "open"
    RECEIVING = "receiving"
    CLOSED = "closed"
    FAILED = "failed"


TERMINAL_STATES = frozenset({DecoderState.CLOSED, DecoderState.FAILED})


class StreamDecoder:
    """Fold one call's vendor events into a :class:`StreamAccumulator`.

    Parameters:
        model: Model requested by the caller (stamped on caller events).
        provider: Provider name stamped on caller events and errors.
        logger: Logger for unknown-event diagnostics.
        ctx: Log context shared with the rest of the call.
    """

    def __init__(
        self,
        *,
        model: str = "",
        provider: str = PROVIDER,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._model = model
        self._provider = provider
        self._logger = logger or get_logger("anthropic.stream_decoder")
        self._ctx = ctx
        self._state = DecoderState.IDLE
        self._acc: Optional[StreamAccumulator] = None
        self._error: Optional[ProviderError] = None
        self._started = False
        self._handlers: Dict[str, Callable[[Mapping[str, Any]], List[ChatStreamEvent]]] = {
            "message_start": self._on_message_start,
            "content_block_start": self._on_block_start,
            "content_block_delta": self._on_block_delta,
            "content_block_stop": self._on_block_stop,
            "message_delta": self._on_message_delta,
            "message_stop": self._on_message_stop,
            "ping": self._on_ping,
            "error": self._on_error,
        }

    # ------------------------------------------------------------------ state
    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def accumulator(self) -> Optional[StreamAccumulator]:
        return self._acc

    @property
    def error(self) -> Optional[ProviderError]:
        """The failure that moved the decoder to FAILED, if any."""
        return self._error

    def open(self) -> None:
        """Transport connected: start with an empty accumulator."""
        if self._state is not DecoderState.IDLE:
            raise ProtocolError(f"decoder cannot open from state {self._state.value}", provider=self._provider, model=self._model)
        self._acc = StreamAccumulator()
        self._state = DecoderState.OPEN

    # ------------------------------------------------------------------ input
    def feed(self, event_name: Optional[str], payload: Any) -> List[ChatStreamEvent]:
        """Apply one vendor event; return the caller events it produced.

        ``event_name`` is the SSE event name; when it is missing (or the SSE
        default ``"message"``) the payload's ``type`` field is used instead.
        """
        if self.terminal:
            raise ProtocolError(
                f"event {event_name!r} received after the stream was {self._state.value}",
                provider=self._provider,
                model=self._model,
            )
        if self._state is DecoderState.IDLE:
            raise self._violation(f"event {event_name!r} received before the stream was opened")
        if not isinstance(payload, Mapping):
            raise self._violation(f"event {event_name!r} payload is not a JSON object")
        name = event_name if event_name and event_name != "message" else payload.get("type")
        self._state = DecoderState.RECEIVING
        handler = self._handlers.get(str(name))
        if handler is None:
            normalized_log_event(
                self._logger,
                "decoder.unknown_event",
                self._ctx,
                phase="stream",
                level=logging.DEBUG,
                vendor_event=str(name),
            )
            return []
        return handler(payload)

    def fail_transport(self, exc: BaseException) -> TransportError:
        """Transport dropped before CLOSED/FAILED: fail with a ``TransportError``."""
        err = TransportError(
            f"stream interrupted before completion: {exc or type(exc).__name__}",
            provider=self._provider,
            model=self._model,
            raw=exc,
        )
        self.fail(err)
        return err

    def fail(self, error: ProviderError) -> ProviderError:
        """Move to FAILED with ``error``, attaching the best-effort partial."""
        if self._state is not DecoderState.FAILED:
            self._state = DecoderState.FAILED
            self._error = error
        if error.partial is None:
            error.partial = self.partial_result()
        return error

    # ----------------------------------------------------------------- output
    def result(self) -> AssembledResponse:
        """Assemble the final response; only valid in CLOSED."""
        if self._state is not DecoderState.CLOSED or self._acc is None:
            raise ProtocolError(f"no final response in state {self._state.value}", provider=self._provider, model=self._model)
        return assemble(self._acc, logger=self._logger, ctx=self._ctx)

    def partial_result(self) -> AssembledResponse:
        """Best-effort response from whatever was accumulated, marked incomplete."""
        if self._acc is None:
            return AssembledResponse(model=self._model, incomplete=True)
        partial = assemble(self._acc, incomplete=True, logger=self._logger, ctx=self._ctx)
        partial.incomplete = True
        return partial

    # --------------------------------------------------------------- handlers
    def reject(self, message: str) -> ProtocolError:
        """Fail with a ``ProtocolError`` for a violation found outside ``feed``."""
        return self._violation(message)

    def _violation(self, message: str) -> ProtocolError:
        err = ProtocolError(message, provider=self._provider, model=self._model)
        self.fail(err)
        return err

    def _event(self, kind: str, index: int, **fields: Any) -> ChatStreamEvent:
        return ChatStreamEvent(provider=self._provider, model=self._model, kind=kind, index=index, **fields)

    def _index(self, payload: Mapping[str, Any]) -> int:
        index = payload.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            raise self._violation(f"{payload.get('type', 'event')} without an integer index")
        return index

    def _open_block(self, payload: Mapping[str, Any]) -> BlockUnderConstruction:
        index = self._index(payload)
        block = self._acc.block_at(index)  # type: ignore[union-attr]
        if block is None:
            raise self._violation(f"no content block at index {index}")
        if not block.open:
            raise self._violation(f"content block {index} is already closed")
        return block

    def _on_message_start(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        if self._started:
            raise self._violation("duplicate message_start")
        self._started = True
        message = payload.get("message")
        if not isinstance(message, Mapping):
            raise self._violation("message_start without a message object")
        acc = self._acc
        acc.message_id = message.get("id")  # type: ignore[union-attr]
        acc.model = message.get("model")  # type: ignore[union-attr]
        usage = message.get("usage")
        acc.usage.add(usage if isinstance(usage, Mapping) else None)  # type: ignore[union-attr]
        if self._ctx is not None and acc.message_id:  # type: ignore[union-attr]
            self._ctx.response_id = acc.message_id  # type: ignore[union-attr]
        return []

    def _on_block_start(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        index = self._index(payload)
        acc = self._acc
        expected = len(acc.blocks)  # type: ignore[union-attr]
        if index != expected:
            raise self._violation(f"content_block_start index {index} out of order (expected {expected})")
        block = payload.get("content_block")
        if not isinstance(block, Mapping):
            raise self._violation(f"content_block_start {index} without a content_block object")
        btype = block.get("type")
        if btype == "text":
            new = acc.add_block(BlockKind.TEXT)  # type: ignore[union-attr]
            initial = block.get("text") or ""
            if initial:
                new.append(initial)
                return [self._event(TEXT_DELTA, index, delta=initial)]
            return []
        if btype == "tool_use":
            tool_id, tool_name = block.get("id"), block.get("name")
            if not tool_id or not tool_name:
                raise self._violation(f"tool_use block {index} is missing its id or name")
            initial_input = block.get("input")
            acc.add_block(  # type: ignore[union-attr]
                BlockKind.TOOL_USE,
                tool_use_id=str(tool_id),
                tool_name=str(tool_name),
                initial_input=dict(initial_input) if isinstance(initial_input, Mapping) else {},
            )
            return [self._event(TOOL_USE_START, index, tool_use_id=str(tool_id), tool_name=str(tool_name))]
        acc.add_block(BlockKind.IGNORED, vendor_type=str(btype))  # type: ignore[union-attr]
        return []

    def _on_block_delta(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        block = self._open_block(payload)
        delta = payload.get("delta")
        if not isinstance(delta, Mapping):
            raise self._violation(f"content_block_delta {block.index} without a delta object")
        if block.kind is BlockKind.IGNORED:
            return []
        dtype = delta.get("type")
        if dtype == "text_delta":
            if block.kind is not BlockKind.TEXT:
                raise self._violation(f"text_delta sent to {block.kind.value} block {block.index}")
            text = delta.get("text")
            if not isinstance(text, str):
                raise self._violation(f"text_delta for block {block.index} has no text")
            block.append(text)
            return [self._event(TEXT_DELTA, block.index, delta=text)]
        if dtype == "input_json_delta":
            if block.kind is not BlockKind.TOOL_USE:
                raise self._violation(f"input_json_delta sent to {block.kind.value} block {block.index}")
            fragment = delta.get("partial_json")
            if not isinstance(fragment, str):
                raise self._violation(f"input_json_delta for block {block.index} has no partial_json")
            block.append(fragment)
            return [
                self._event(
                    TOOL_ARGUMENTS_DELTA,
                    block.index,
                    delta=fragment,
                    tool_use_id=block.tool_use_id,
                    tool_name=block.tool_name,
                )
            ]
        # Annotations such as citations_delta ride along text blocks; not modelled.
        normalized_log_event(
            self._logger,
            "decoder.unknown_event",
            self._ctx,
            phase="stream",
            level=logging.DEBUG,
            vendor_event=f"content_block_delta:{dtype}",
        )
        return []

    def _on_block_stop(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        block = self._open_block(payload)
        block.close()
        if block.kind is BlockKind.IGNORED:
            return []
        return [self._event(BLOCK_STOP, block.index, tool_use_id=block.tool_use_id, tool_name=block.tool_name)]

    def _on_message_delta(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        acc = self._acc
        delta = payload.get("delta")
        if isinstance(delta, Mapping):
            if delta.get("stop_reason") is not None:
                acc.stop_reason = delta["stop_reason"]  # type: ignore[union-attr]
            if delta.get("stop_sequence") is not None:
                acc.stop_sequence = delta["stop_sequence"]  # type: ignore[union-attr]
        usage = payload.get("usage")
        acc.usage.add(usage if isinstance(usage, Mapping) else None)  # type: ignore[union-attr]
        return []

    def _on_message_stop(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        unclosed = [b.index for b in self._acc.open_blocks()]  # type: ignore[union-attr]
        if unclosed:
            raise self._violation(f"message_stop with unclosed content blocks {unclosed}")
        self._acc.complete = True  # type: ignore[union-attr]
        self._state = DecoderState.CLOSED
        return []

    def _on_ping(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        return []

    def _on_error(self, payload: Mapping[str, Any]) -> List[ChatStreamEvent]:
        self.fail(classify_vendor_error(payload, provider=self._provider, model=self._model))
        return []


__all__ = ["DecoderState", "TERMINAL_STATES", "StreamDecoder"]
