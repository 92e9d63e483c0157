"""
Structured adapter error exception types.

`ProviderError` is the root of the taxonomy. Each subclass pins a normalized
`ErrorCode` so callers can either catch by class or branch on ``code``.
Only `RateLimitError` and `TransportError` carry ``retryable=True``; the hint
is advisory because the adapter itself never retries.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class ProviderError(Exception):
    """Represents a structured adapter error with a normalized error code.

    Attributes:
        message: Human-readable error message suitable for logging or display.
        provider: Provider key where the error originated (e.g., ``"anthropic"``).
        model: Optional model name associated with the failure.
        retryable: Hint for caller-driven retry logic (not authoritative).
        status_code: HTTP status of the failed response, when one exists.
        vendor_type: Vendor error ``type`` string from the error body, if any.
        raw: Optional original exception or payload for diagnostics.
        partial: Best-effort partial ``AssembledResponse`` for failures that
            happen mid-stream. Always marked ``incomplete``.
    """

    message: str
    provider: Optional[str] = None
    model: Optional[str] = None
    retryable: bool = False
    status_code: Optional[int] = None
    vendor_type: Optional[str] = None
    raw: Optional[Any] = None
    partial: Optional[Any] = None

    code: ClassVar[ErrorCode] = ErrorCode.UPSTREAM

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider or '-'}:{self.model or '-'} {self.code.value}: {self.message}"


@dataclass(eq=False)
class ValidationError(ProviderError):
    """Bad input shape. A caller bug; never retried."""

    code: ClassVar[ErrorCode] = ErrorCode.VALIDATION


@dataclass(eq=False)
class CapabilityError(ProviderError):
    """The request exceeds what the target model declares it can do."""

    capability: Optional[str] = None

    code: ClassVar[ErrorCode] = ErrorCode.CAPABILITY


@dataclass(eq=False)
class AuthenticationError(ProviderError):
    code: ClassVar[ErrorCode] = ErrorCode.AUTH


@dataclass(eq=False)
class RateLimitError(ProviderError):
    """Vendor throttled the call. ``retry_after`` is seconds, when hinted."""

    retryable: bool = True
    retry_after: Optional[float] = None

    code: ClassVar[ErrorCode] = ErrorCode.RATE_LIMIT


@dataclass(eq=False)
class InvalidRequestError(ProviderError):
    """Vendor rejected the request; ``message`` is the vendor text verbatim."""

    code: ClassVar[ErrorCode] = ErrorCode.INVALID_REQUEST


@dataclass(eq=False)
class ModelUnavailableError(ProviderError):
    code: ClassVar[ErrorCode] = ErrorCode.MODEL_UNAVAILABLE


@dataclass(eq=False)
class TransportError(ProviderError):
    """Connection failures, disconnects and transport-level timeouts."""

    retryable: bool = True

    code: ClassVar[ErrorCode] = ErrorCode.TRANSPORT


@dataclass(eq=False)
class ProtocolError(ProviderError):
    """Malformed or out-of-order stream events."""

    code: ClassVar[ErrorCode] = ErrorCode.PROTOCOL


@dataclass(eq=False)
class UpstreamError(ProviderError):
    """Anything the classifier could not place more precisely."""

    code: ClassVar[ErrorCode] = ErrorCode.UPSTREAM


@dataclass(eq=False)
class MalformedToolArgumentsError(ProviderError):
    """Tool-use arguments did not parse as a JSON object.

    Recovered locally: the error is attached to the affected
    ``ToolInvocation`` instead of being raised.
    """

    tool_use_id: Optional[str] = None
    tool_name: Optional[str] = None
    raw_arguments: Optional[str] = None

    code: ClassVar[ErrorCode] = ErrorCode.MALFORMED_TOOL_ARGUMENTS


ERROR_TYPES = {
    cls.code: cls
    for cls in (
        ValidationError,
        CapabilityError,
        AuthenticationError,
        RateLimitError,
        InvalidRequestError,
        ModelUnavailableError,
        TransportError,
        ProtocolError,
        UpstreamError,
        MalformedToolArgumentsError,
    )
}


def error_for_code(code: ErrorCode, message: str, **fields: Any) -> ProviderError:
    """Instantiate the taxonomy class registered for ``code``.

    Unknown codes (e.g. ``CANCELLED``) fall back to `UpstreamError` so that a
    failure is never dropped for lack of a matching class.
    """
    cls = ERROR_TYPES.get(code, UpstreamError)
    return cls(message=message, **fields)


__all__ = [
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
    "ERROR_TYPES",
    "error_for_code",
]
