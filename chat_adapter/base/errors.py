"""Unified adapter error taxonomy public surface.

This module re-exports the one-concern-per-file implementations under
``chat_adapter.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    AuthenticationError,
    CapabilityError,
    InvalidRequestError,
    MalformedToolArgumentsError,
    ModelUnavailableError,
    ProtocolError,
    ProviderError,
    RateLimitError,
    TransportError,
    UpstreamError,
    ValidationError,
    error_for_code,
)
from .errors_parts.classification import (
    classify_exception,
    code_for_status,
    to_provider_error,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "CapabilityError",
    "AuthenticationError",
    "RateLimitError",
    "InvalidRequestError",
    "ModelUnavailableError",
    "TransportError",
    "ProtocolError",
    "UpstreamError",
    "MalformedToolArgumentsError",
    "error_for_code",
    "classify_exception",
    "code_for_status",
    "to_provider_error",
]
