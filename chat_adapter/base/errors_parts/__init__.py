"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `chat_adapter.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import (
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
from .classification import classify_exception, code_for_status, to_provider_error

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
