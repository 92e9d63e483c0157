from __future__ import annotations

import json
import types

import httpx

from chat_adapter.base.cancellation import CancelledError
from chat_adapter.base.errors import (
    AuthenticationError,
    ErrorCode,
    ProviderError,
    RateLimitError,
    TransportError,
    UpstreamError,
    ValidationError,
    classify_exception,
    code_for_status,
    error_for_code,
    to_provider_error,
)


def test_classify_provider_error_passthrough():
    e = AuthenticationError("nope", provider="anthropic")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101


def test_classify_http_status_mapping():
    assert classify_exception(types.SimpleNamespace(status_code=429)) is ErrorCode.RATE_LIMIT  # nosec B101
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=401))
    assert classify_exception(e2) is ErrorCode.AUTH  # nosec B101
    assert code_for_status(503) is ErrorCode.UPSTREAM  # nosec B101
    assert code_for_status(413) is ErrorCode.INVALID_REQUEST  # nosec B101


def test_classify_transport_and_protocol_failures():
    req = httpx.Request("POST", "https://api.example.com/v1/messages")
    assert classify_exception(httpx.ConnectError("refused", request=req)) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow", request=req)) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(ConnectionResetError()) is ErrorCode.TRANSPORT  # nosec B101
    try:
        json.loads("{")
    except json.JSONDecodeError as exc:
        assert classify_exception(exc) is ErrorCode.PROTOCOL  # nosec B101
    assert classify_exception(CancelledError("x")) is ErrorCode.CANCELLED  # nosec B101
    assert classify_exception(RuntimeError("random")) is ErrorCode.UPSTREAM  # nosec B101


def test_only_rate_limit_and_transport_are_retryable():
    assert RateLimitError("slow down").retryable  # nosec B101
    assert TransportError("reset").retryable  # nosec B101
    assert not ValidationError("bad").retryable  # nosec B101
    assert not UpstreamError("boom").retryable  # nosec B101


def test_error_for_code_falls_back_to_upstream():
    err = error_for_code(ErrorCode.CANCELLED, "x")
    assert isinstance(err, UpstreamError)  # nosec B101
    rl = error_for_code(ErrorCode.RATE_LIMIT, "slow", retry_after=3.0)
    assert isinstance(rl, RateLimitError) and rl.retry_after == 3.0  # nosec B101


def test_to_provider_error_wraps_and_keeps_raw():
    exc = ConnectionRefusedError("refused")
    err = to_provider_error(exc, provider="anthropic", model="m")
    assert isinstance(err, TransportError)  # nosec B101
    assert err.raw is exc and err.model == "m"  # nosec B101
    same = ValidationError("bad")
    assert to_provider_error(same) is same  # nosec B101


def test_provider_error_str_and_catchability():
    err = RateLimitError("slow down", provider="anthropic", model="m", status_code=429)
    assert str(err) == "anthropic:m rate_limit: slow down"  # nosec B101
    assert isinstance(err, ProviderError) and isinstance(err, Exception)  # nosec B101
