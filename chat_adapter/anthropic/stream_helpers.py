"""Anthropic streaming flow.

``stream_chat_impl`` validates the request eagerly (so pre-flight errors are
raised at call time, before any I/O) and returns a generator that:

1. opens the transport and registers ``response.close`` as a cancel callback;
2. frames response bytes into SSE events and feeds them to a
   :class:`StreamDecoder`, yielding each caller event as soon as it exists;
3. ends with exactly one terminal ``ChatStreamEvent`` carrying the final
   response, or the classified error (plus a best-effort partial once the
   event stream was opened), or a ``CancelledError`` with no response at all.

The response is always closed when the generator finishes, is closed by the
consumer, or is cancelled.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import suppress
from typing import Iterator, Optional

from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import ProviderError, to_provider_error
from ..base.logging import LogContext, normalized_log_event
from ..base.models import AssembledResponse, ChatRequest, ProviderMetadata
from ..base.streaming import FINISH, ChatStreamEvent, SseDecoder, SseEvent
from .error_mapping import classify_http_error
from .helpers import PreparedCall, prepare_call
from .stream_decoder import DecoderState, StreamDecoder


def _terminal(
    provider_name: str,
    model: str,
    *,
    response: Optional[AssembledResponse] = None,
    error: Optional[BaseException] = None,
    partial: Optional[AssembledResponse] = None,
) -> ChatStreamEvent:
    return ChatStreamEvent(
        provider=provider_name,
        model=model,
        kind=FINISH,
        finish=True,
        response=response,
        error=error,
        partial=partial,
    )


def _decode(sse_event: SseEvent, decoder: StreamDecoder):
    try:
        payload = sse_event.json()
    except json.JSONDecodeError as exc:
        raise decoder.reject(f"stream event {sse_event.event!r} carries invalid JSON: {exc.msg}") from exc
    return decoder.feed(sse_event.event, payload)


def iterate_stream(response, decoder: StreamDecoder, token: CancellationToken) -> Iterator[ChatStreamEvent]:
    """Yield caller events until the decoder reaches a terminal state.

    Raises whatever the transport raises on read; protocol violations surface
    as ``ProtocolError`` with the decoder already FAILED.
    """
    sse = SseDecoder()
    for chunk in response.iter_bytes():
        token.raise_if_cancelled()
        for sse_event in sse.feed(chunk):
            for evt in _decode(sse_event, decoder):
                yield evt
                token.raise_if_cancelled()
            if decoder.terminal:
                return
    token.raise_if_cancelled()
    for sse_event in sse.finish():
        for evt in _decode(sse_event, decoder):
            yield evt
        if decoder.terminal:
            return


def stream_chat_impl(
    provider,
    request: ChatRequest,
    token: Optional[CancellationToken] = None,
) -> Iterator[ChatStreamEvent]:
    """Validate ``request`` now and return the event generator for the call."""
    prepared = prepare_call(provider, request, stream=True)
    return _run_stream(provider, prepared, token or CancellationToken())


def _run_stream(provider, prepared: PreparedCall, token: CancellationToken) -> Iterator[ChatStreamEvent]:  # noqa: C901
    name = provider.provider_name
    model = prepared.model
    logger: logging.Logger = provider._logger
    ctx = LogContext(provider=name, model=model)
    decoder = StreamDecoder(model=model, provider=name, logger=logger, ctx=ctx)
    counters = provider._counters
    counters.record_start(streamed=True)
    normalized_log_event(
        logger,
        "stream.start",
        ctx,
        phase="start",
        has_tools=bool(prepared.request.tools),
        max_tokens=prepared.request.max_tokens,
    )
    t0 = time.perf_counter()
    emitted = 0
    response = None
    status: Optional[int] = None

    def _elapsed_ms() -> int:
        return int((time.perf_counter() - t0) * 1000)

    def _cancelled() -> ChatStreamEvent:
        counters.record_cancelled()
        normalized_log_event(
            logger,
            "stream.cancelled",
            ctx,
            phase="finalize",
            emitted=emitted,
            reason=token.reason,
            latency_ms=_elapsed_ms(),
        )
        return _terminal(name, model, error=CancelledError(token.reason or "stream cancelled"))

    def _failed(err: ProviderError) -> ChatStreamEvent:
        if err.partial is None and decoder.state is not DecoderState.IDLE:
            decoder.fail(err)
        if err.status_code is None:
            err.status_code = status
        counters.record_failure(err.code.value, _elapsed_ms())
        normalized_log_event(
            logger,
            "stream.error",
            ctx,
            phase="finalize",
            error_code=err.code.value,
            level=logging.ERROR,
            emitted=emitted,
            error=err.message,
            http_status=status,
            latency_ms=_elapsed_ms(),
        )
        return _terminal(name, model, error=err, partial=err.partial)

    try:
        token.raise_if_cancelled()
        try:
            response = provider.transport.open(prepared.path, prepared.body, prepared.headers)
        except CancelledError:
            raise
        except Exception as exc:
            if token.cancelled:
                raise CancelledError(token.reason or "stream cancelled") from exc
            yield _failed(to_provider_error(exc, provider=name, model=model))
            return
        token.add_callback(response.close)
        status = response.status_code
        ctx.request_id = response.headers.get("request-id") if response.headers is not None else None

        if status >= 400:
            try:
                body = response.read()
            except Exception as exc:
                if token.cancelled:
                    raise CancelledError(token.reason or "stream cancelled") from exc
                yield _failed(to_provider_error(exc, provider=name, model=model))
                return
            yield _failed(classify_http_error(status, body, response.headers, provider=name, model=model))
            return

        decoder.open()
        try:
            for evt in iterate_stream(response, decoder, token):
                emitted += 1
                yield evt
        except (CancelledError, GeneratorExit):
            raise
        except ProviderError as err:
            yield _failed(err)
            return
        except Exception as exc:
            if token.cancelled:
                raise CancelledError(token.reason or "stream cancelled") from exc
            yield _failed(decoder.fail_transport(exc))
            return

        if decoder.state is DecoderState.FAILED and decoder.error is not None:
            yield _failed(decoder.error)
            return
        if decoder.state is not DecoderState.CLOSED:
            yield _failed(decoder.fail_transport(ConnectionError("stream ended before message_stop")))
            return

        result = decoder.result()
        result.meta = ProviderMetadata(
            provider_name=name,
            model_name=model,
            http_status=status,
            request_id=ctx.request_id,
            response_id=result.message_id,
            latency_ms=float(_elapsed_ms()),
            streamed=True,
        )
        counters.record_success(_elapsed_ms())
        normalized_log_event(
            logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            tokens=result.usage,
            stop_reason=result.stop_reason,
            latency_ms=_elapsed_ms(),
        )
        yield _terminal(name, model, response=result)
    except CancelledError:
        yield _cancelled()
    except GeneratorExit:
        if not decoder.terminal:
            counters.record_cancelled()
            normalized_log_event(logger, "stream.cancelled", ctx, phase="finalize", emitted=emitted, reason="generator closed")
        raise
    finally:
        if response is not None:
            token.remove_callback(response.close)
            with suppress(Exception):
                response.close()


__all__ = ["iterate_stream", "stream_chat_impl"]
