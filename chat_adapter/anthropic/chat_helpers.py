"""Anthropic non-streaming chat flow.

Send once, read the whole body, and run it through the same accumulator and
assembler as a stream would. Every failure is classified and raised as a
``ProviderError``; there are no internal retries.
"""

from __future__ import annotations

import json
import logging
import time

from ..base.errors import ProtocolError, to_provider_error
from ..base.logging import LogContext, normalized_log_event
from ..base.models import AssembledResponse, ChatRequest, ProviderMetadata
from .assembler import assemble_message
from .error_mapping import classify_http_error
from .helpers import prepare_call


def _request_id(headers) -> str | None:
    return headers.get("request-id") if headers is not None else None


def chat_impl(provider, request: ChatRequest) -> AssembledResponse:
    """Run one non-streaming call.

    Parameters:
        provider: ``AnthropicProvider`` exposing ``transport``, ``_logger``,
            ``_counters`` and ``provider_name``.
        request: Inbound chat request.

    Raises:
        ValidationError, CapabilityError: before any I/O.
        ProviderError: the classified vendor or transport failure.
    """
    prepared = prepare_call(provider, request, stream=False)
    ctx = LogContext(provider=provider.provider_name, model=prepared.model)
    provider._counters.record_start()
    normalized_log_event(
        provider._logger,
        "chat.start",
        ctx,
        phase="start",
        has_tools=bool(prepared.request.tools),
        max_tokens=prepared.request.max_tokens,
        temperature=prepared.request.temperature,
    )
    t0 = time.perf_counter()
    status = None
    try:
        response = provider.transport.open(prepared.path, prepared.body, prepared.headers)
        try:
            status = response.status_code
            ctx.request_id = _request_id(response.headers)
            raw = response.read()
            if status >= 400:
                raise classify_http_error(
                    status, raw, response.headers, provider=provider.provider_name, model=prepared.model
                )
            try:
                body = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise ProtocolError(
                    f"response body is not valid JSON: {exc}",
                    provider=provider.provider_name,
                    model=prepared.model,
                    status_code=status,
                    raw=exc,
                ) from exc
        finally:
            response.close()
        result = assemble_message(body, logger=provider._logger, ctx=ctx)
    except Exception as exc:
        err = to_provider_error(exc, provider=provider.provider_name, model=prepared.model)
        latency_ms = int((time.perf_counter() - t0) * 1000)
        provider._counters.record_failure(err.code.value, latency_ms)
        normalized_log_event(
            provider._logger,
            "chat.error",
            ctx,
            phase="finalize",
            error_code=err.code.value,
            level=logging.ERROR,
            error=err.message,
            http_status=err.status_code or status,
            latency_ms=latency_ms,
        )
        if err is exc:
            raise
        raise err from exc

    latency_ms = int((time.perf_counter() - t0) * 1000)
    ctx.response_id = result.message_id
    result.meta = ProviderMetadata(
        provider_name=provider.provider_name,
        model_name=prepared.model,
        http_status=status,
        request_id=ctx.request_id,
        response_id=result.message_id,
        latency_ms=float(latency_ms),
        streamed=False,
    )
    provider._counters.record_success(latency_ms)
    normalized_log_event(
        provider._logger,
        "chat.end",
        ctx,
        phase="finalize",
        tokens=result.usage,
        stop_reason=result.stop_reason,
        latency_ms=latency_ms,
    )
    return result


__all__ = ["chat_impl"]
