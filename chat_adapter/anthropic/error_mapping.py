"""Anthropic error bodies -> adapter error taxonomy.

HTTP failures arrive as a status plus a JSON body of the form
``{"type": "error", "error": {"type": "...", "message": "..."}}``; stream
failures arrive as an ``error`` SSE event with the same payload. Status codes
decide first where they are unambiguous (401/403, 429); the vendor ``type``
refines the rest.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from ..base.errors import ErrorCode, ProviderError, code_for_status, error_for_code

PROVIDER = "anthropic"

VENDOR_ERROR_CODES: Dict[str, ErrorCode] = {
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "rate_limit_error": ErrorCode.RATE_LIMIT,
    "not_found_error": ErrorCode.MODEL_UNAVAILABLE,
    "invalid_request_error": ErrorCode.INVALID_REQUEST,
    "request_too_large": ErrorCode.INVALID_REQUEST,
    "overloaded_error": ErrorCode.UPSTREAM,
    "api_error": ErrorCode.UPSTREAM,
}


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    """Seconds to wait from a ``retry-after`` header (delta-seconds or HTTP date)."""
    raw = _header(headers, "retry-after")
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def _body_text(body: Any) -> Any:
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode("utf-8", errors="replace")
    return body


def parse_error_body(body: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(vendor_type, message)`` from an error body in any shape.

    Accepts bytes, text or an already-decoded mapping. Bodies that are not
    vendor JSON yield ``(None, text)`` so the message is still surfaced.
    """
    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8", errors="replace")
    if isinstance(body, str):
        text = body.strip()
        if not text:
            return None, None
        try:
            body = json.loads(text)
        except json.JSONDecodeError:
            return None, text
    if not isinstance(body, Mapping):
        return None, None
    err = body.get("error")
    if isinstance(err, Mapping):
        vtype, message = err.get("type"), err.get("message")
    else:
        vtype, message = body.get("type"), body.get("message")
        if vtype == "error":
            vtype = None
    return (str(vtype) if vtype else None), (str(message) if message else None)


def classify_http_error(
    status: int,
    body: Any,
    headers: Optional[Mapping[str, str]] = None,
    *,
    provider: str = PROVIDER,
    model: Optional[str] = None,
) -> ProviderError:
    """Map an HTTP failure to a taxonomy error.

    401/403 are always authentication failures and 429 is always a rate
    limit, whatever the body says. 404 or a ``not_found_error`` body means the
    model is unavailable. 400/413/422 are invalid requests carrying the
    vendor's message verbatim. Anything else is an upstream error.
    """
    vendor_type, message = parse_error_body(body)
    code = code_for_status(status)
    if code in (ErrorCode.UPSTREAM, ErrorCode.INVALID_REQUEST) and vendor_type == "not_found_error":
        code = ErrorCode.MODEL_UNAVAILABLE
    fields: Dict[str, Any] = {
        "provider": provider,
        "model": model,
        "status_code": status,
        "vendor_type": vendor_type,
        "raw": {"request_id": _header(headers, "request-id"), "body": _body_text(body)},
    }
    if code is ErrorCode.RATE_LIMIT:
        fields["retry_after"] = parse_retry_after(headers)
    return error_for_code(code, message or f"HTTP {status}", **fields)


def classify_vendor_error(
    payload: Any,
    *,
    provider: str = PROVIDER,
    model: Optional[str] = None,
) -> ProviderError:
    """Map a stream ``error`` event payload to a taxonomy error."""
    vendor_type, message = parse_error_body(payload)
    code = VENDOR_ERROR_CODES.get(vendor_type or "", ErrorCode.UPSTREAM)
    return error_for_code(
        code,
        message or f"vendor error ({vendor_type or 'unknown'})",
        provider=provider,
        model=model,
        vendor_type=vendor_type,
        raw=payload,
    )


__all__ = [
    "VENDOR_ERROR_CODES",
    "parse_retry_after",
    "parse_error_body",
    "classify_http_error",
    "classify_vendor_error",
]
