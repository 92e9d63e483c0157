"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction and status-to-code mapping for arbitrary
exceptions (transport library errors, foreign exceptions carrying a status).
Vendor error *bodies* are interpreted by the vendor package; this module only
knows about status codes and exception classes.
"""
from __future__ import annotations

import json
from typing import Dict, Optional

import httpx

from ..cancellation_parts.cancelled_error import CancelledError
from .error_code import ErrorCode
from .provider_error import ProviderError, error_for_code


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.MODEL_UNAVAILABLE,
    408: ErrorCode.TRANSPORT,
    413: ErrorCode.INVALID_REQUEST,
    422: ErrorCode.INVALID_REQUEST,
    429: ErrorCode.RATE_LIMIT,
}


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status to an error code; unmapped statuses are ``UPSTREAM``."""
    return _HTTP_STATUS_MAP.get(status, ErrorCode.UPSTREAM)


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Cooperative cancellation.
        3. Transport failures (httpx transport errors, timeouts, OS connection errors).
        4. JSON decoding failures (malformed vendor payloads).
        5. HTTP status mapping.
        6. ``UPSTREAM`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, CancelledError):
        return ErrorCode.CANCELLED
    if isinstance(exc, (httpx.TransportError, TimeoutError, ConnectionError)):
        return ErrorCode.TRANSPORT
    if isinstance(exc, json.JSONDecodeError):
        return ErrorCode.PROTOCOL
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    return ErrorCode.UPSTREAM


def to_provider_error(
    exc: BaseException,
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> ProviderError:
    """Return ``exc`` as a taxonomy error, wrapping foreign exceptions.

    ProviderError instances are returned unchanged. Everything else is wrapped
    in the class matching :func:`classify_exception`, keeping the original as
    ``raw``.
    """
    if isinstance(exc, ProviderError):
        return exc
    code = classify_exception(exc)
    return error_for_code(
        code,
        str(exc) or exc.__class__.__name__,
        provider=provider,
        model=model,
        status_code=_extract_status(exc),
        raw=exc,
    )


__all__ = [
    "classify_exception",
    "code_for_status",
    "to_provider_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
