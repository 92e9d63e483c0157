"""HTTP and stream error classification for the Anthropic adapter."""
from __future__ import annotations

import json

import pytest

from chat_adapter.anthropic import classify_http_error, classify_vendor_error
from chat_adapter.anthropic.error_mapping import parse_error_body, parse_retry_after
from chat_adapter.base.errors import (
    AuthenticationError,
    ErrorCode,
    InvalidRequestError,
    ModelUnavailableError,
    RateLimitError,
    UpstreamError,
)


def _body(vtype: str, message: str) -> bytes:
    return json.dumps({"type": "error", "error": {"type": vtype, "message": message}}).encode()


@pytest.mark.parametrize(
    "body",
    [_body("rate_limit_error", "slow down"), _body("invalid_request_error", "odd"), b"", b"<html>busy</html>"],
)
def test_429_is_rate_limit_whatever_the_body(body):
    err = classify_http_error(429, body, {"Retry-After": "7", "request-id": "req_1"}, model="m")
    assert isinstance(err, RateLimitError)  # nosec B101
    assert err.retryable and err.retry_after == 7.0  # nosec B101
    assert err.status_code == 429 and err.model == "m"  # nosec B101
    assert err.raw["request_id"] == "req_1"  # nosec B101


@pytest.mark.parametrize("status", [401, 403])
@pytest.mark.parametrize("body", [_body("rate_limit_error", "x"), b"", b"not json"])
def test_401_and_403_are_auth_whatever_the_body(status, body):
    err = classify_http_error(status, body)
    assert isinstance(err, AuthenticationError)  # nosec B101
    assert not err.retryable and err.code is ErrorCode.AUTH  # nosec B101


def test_404_and_not_found_body_are_model_unavailable():
    assert isinstance(classify_http_error(404, b""), ModelUnavailableError)  # nosec B101
    err = classify_http_error(400, _body("not_found_error", "model: claude-x"))
    assert isinstance(err, ModelUnavailableError)  # nosec B101
    assert err.vendor_type == "not_found_error"  # nosec B101


def test_invalid_request_keeps_vendor_message_verbatim():
    msg = "max_tokens: 999999 > 64000, which is the maximum allowed"
    err = classify_http_error(400, _body("invalid_request_error", msg))
    assert isinstance(err, InvalidRequestError)  # nosec B101
    assert err.message == msg  # nosec B101
    assert not err.retryable  # nosec B101


@pytest.mark.parametrize("status,vtype", [(500, "api_error"), (529, "overloaded_error"), (502, None)])
def test_server_side_failures_are_upstream(status, vtype):
    body = _body(vtype, "boom") if vtype else b"<html>bad gateway</html>"
    err = classify_http_error(status, body)
    assert isinstance(err, UpstreamError)  # nosec B101
    assert not err.retryable  # nosec B101
    assert err.vendor_type == vtype  # nosec B101


def test_message_falls_back_to_status_and_text():
    assert classify_http_error(503, b"").message == "HTTP 503"  # nosec B101
    assert classify_http_error(502, b"bad gateway").message == "bad gateway"  # nosec B101


def test_parse_error_body_shapes():
    assert parse_error_body(_body("api_error", "x")) == ("api_error", "x")  # nosec B101
    assert parse_error_body({"type": "error", "message": "flat"}) == (None, "flat")  # nosec B101
    assert parse_error_body("   ") == (None, None)  # nosec B101
    assert parse_error_body([1, 2]) == (None, None)  # nosec B101


def test_parse_retry_after_variants():
    assert parse_retry_after(None) is None  # nosec B101
    assert parse_retry_after({"retry-after": "2.5"}) == 2.5  # nosec B101
    assert parse_retry_after({"retry-after": "soon"}) is None  # nosec B101
    # A date in the past clamps to zero.
    assert parse_retry_after({"retry-after": "Wed, 21 Oct 2015 07:28:00 GMT"}) == 0.0  # nosec B101


@pytest.mark.parametrize(
    "vtype,cls",
    [
        ("overloaded_error", UpstreamError),
        ("rate_limit_error", RateLimitError),
        ("authentication_error", AuthenticationError),
        ("invalid_request_error", InvalidRequestError),
        ("something_new", UpstreamError),
    ],
)
def test_classify_vendor_error_event(vtype, cls):
    payload = {"type": "error", "error": {"type": vtype, "message": "m"}}
    err = classify_vendor_error(payload, model="claude-sonnet-4-5")
    assert type(err) is cls  # nosec B101
    assert err.status_code is None and err.raw is payload  # nosec B101


def test_classify_vendor_error_without_message():
    err = classify_vendor_error({"type": "error"})
    assert isinstance(err, UpstreamError)  # nosec B101
    assert "unknown" in err.message  # nosec B101
