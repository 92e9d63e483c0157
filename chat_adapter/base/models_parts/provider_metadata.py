"""
Provider call metadata model.

Diagnostic metadata attached to every assembled response (HTTP status,
identifiers, latency) to support observability.
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional


@dataclass
class ProviderMetadata:
    """Execution metadata for a provider call.

    Attributes:
        provider_name: Canonical provider key (e.g., ``"anthropic"``).
        model_name: Model identifier requested by the caller.
        http_status: HTTP status code of the vendor response, when known.
        request_id: Vendor request identifier (``request-id`` header).
        response_id: Vendor message identifier.
        latency_ms: End-to-end latency for the operation, in milliseconds.
        streamed: Whether the response was reconstructed from a stream.
        extra: Opaque, JSON-serializable map for adapter-specific diagnostics.
    """

    provider_name: str
    model_name: str
    http_status: Optional[int] = None
    request_id: Optional[str] = None
    response_id: Optional[str] = None
    latency_ms: Optional[float] = None
    streamed: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary of the metadata fields."""
        return asdict(self)


__all__ = ["ProviderMetadata"]
