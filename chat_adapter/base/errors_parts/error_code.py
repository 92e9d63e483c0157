"""
Normalized adapter error codes (taxonomy).

Defines the `ErrorCode` enumeration shared by every error raised or surfaced by
the adapter. Values are lowercase snake_case and are considered a stable public
contract for logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    VALIDATION = "validation"
    CAPABILITY = "capability"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    INVALID_REQUEST = "invalid_request"
    MODEL_UNAVAILABLE = "model_unavailable"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    MALFORMED_TOOL_ARGUMENTS = "malformed_tool_arguments"
    CANCELLED = "cancelled"
    UPSTREAM = "upstream"


__all__ = ["ErrorCode"]
