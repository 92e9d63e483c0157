"""Anthropic call preparation shared by the chat and streaming paths.

Everything here runs before any network I/O: conversation normalization,
request building (capability gating included), credential presence checks
and header construction. Failures raise immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..base.errors import ValidationError
from ..base.models import ChatRequest
from ..config.defaults import ANTHROPIC_MESSAGES_PATH
from .normalizer import normalize
from .request_builder import build_request
from .wire import VendorRequest

ANTHROPIC_VERSION_HEADER = "anthropic-version"
API_KEY_HEADER = "x-api-key"  # pragma: allowlist secret - header name
SSE_CONTENT_TYPE = "text/event-stream"


@dataclass(frozen=True)
class PreparedCall:
    """A fully validated request ready for the transport."""

    model: str
    request: VendorRequest
    path: str
    body: bytes
    headers: Mapping[str, str]


def build_headers(
    api_key: Optional[str],
    api_version: Optional[str],
    *,
    stream: bool,
    extra: Optional[Mapping[str, str]] = None,
    model: Optional[str] = None,
) -> Dict[str, str]:
    """Return the vendor headers; credential and version must be non-empty.

    The values are opaque: nothing beyond presence is checked.
    """
    if not api_key:
        raise ValidationError("an API key is required to call the vendor", provider="anthropic", model=model)
    if not api_version:
        raise ValidationError("an API version is required to call the vendor", provider="anthropic", model=model)
    headers: Dict[str, str] = dict(extra or {})
    headers.update(
        {
            API_KEY_HEADER: api_key,
            ANTHROPIC_VERSION_HEADER: api_version,
            "content-type": "application/json",
            "accept": SSE_CONTENT_TYPE if stream else "application/json",
        }
    )
    return headers


def prepare_call(provider, request: ChatRequest, *, stream: bool) -> PreparedCall:
    """Validate ``request`` and turn it into a :class:`PreparedCall`.

    Parameters:
        provider: The ``AnthropicProvider`` supplying credentials, default
            model, system prompt mode and capability classifier.
        request: Inbound chat request.
        stream: Whether the vendor should stream the response.
    """
    model = request.model or provider.default_model()
    if not model:
        raise ValidationError("model is required", provider=provider.provider_name)
    params = provider.params
    conversation = normalize(request.messages, system_prompt_mode=params.system_prompt_mode)
    vendor_request = build_request(
        model,
        conversation,
        {
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "top_p": request.top_p,
            "top_k": request.top_k,
            "stop_sequences": request.stop_sequences,
        },
        tools=request.tools,
        stream=stream,
        classifier=provider.classifier,
    )
    headers = build_headers(
        params.api_key,
        params.api_version,
        stream=stream,
        extra=params.headers,
        model=model,
    )
    return PreparedCall(
        model=model,
        request=vendor_request,
        path=ANTHROPIC_MESSAGES_PATH,
        body=vendor_request.to_json_bytes(),
        headers=headers,
    )


__all__ = [
    "ANTHROPIC_VERSION_HEADER",
    "API_KEY_HEADER",
    "SSE_CONTENT_TYPE",
    "PreparedCall",
    "build_headers",
    "prepare_call",
]
