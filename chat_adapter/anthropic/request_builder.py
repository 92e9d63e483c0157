"""Assemble the final ``VendorRequest``.

Capability gating happens here, once per request and before any I/O: image
blocks and tool definitions are only allowed for models whose capability
pattern table grants them.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

import pydantic

from ..base.capabilities import CAP_IMAGES, CAP_TOOLS, CapabilityClassifier, default_classifier
from ..base.dto import SamplingParams, ToolSchema
from ..base.errors import CapabilityError, ValidationError
from .normalizer import PROVIDER, NormalizedConversation
from .wire import VendorRequest


def _first_error(exc: pydantic.ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "value"
    return f"{loc}: {err.get('msg', 'invalid value')}"


def coerce_sampling(params: Union[SamplingParams, Mapping[str, Any]], *, model: Optional[str] = None) -> SamplingParams:
    """Validate sampling parameters. ``max_tokens`` is never defaulted."""
    if isinstance(params, SamplingParams):
        return params
    values = {k: v for k, v in dict(params).items() if v is not None}
    if "max_tokens" not in values:
        raise ValidationError("max_tokens is required", provider=PROVIDER, model=model)
    try:
        return SamplingParams.model_validate(values)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"invalid sampling parameter {_first_error(exc)}", provider=PROVIDER, model=model) from exc


def coerce_tools(tools: Optional[Iterable[Any]], *, model: Optional[str] = None) -> Optional[tuple]:
    """Validate tool definitions; ``None`` or empty means "no tools"."""
    if not tools:
        return None
    schemas = []
    seen = set()
    for tool in tools:
        try:
            schema = ToolSchema.coerce(tool)
        except (pydantic.ValidationError, TypeError, ValueError) as exc:
            detail = _first_error(exc) if isinstance(exc, pydantic.ValidationError) else str(exc)
            raise ValidationError(f"invalid tool definition {detail}", provider=PROVIDER, model=model) from exc
        if schema.name in seen:
            raise ValidationError(f"duplicate tool name {schema.name!r}", provider=PROVIDER, model=model)
        seen.add(schema.name)
        schemas.append(schema.to_wire())
    return tuple(schemas) or None


def build_request(
    model: str,
    conversation: NormalizedConversation,
    params: Union[SamplingParams, Mapping[str, Any]],
    *,
    tools: Optional[Iterable[Any]] = None,
    stream: bool = False,
    classifier: Optional[CapabilityClassifier] = None,
) -> VendorRequest:
    """Build the wire request for ``model``.

    Raises:
        ValidationError: empty model, missing ``max_tokens``, out-of-range
            sampling values or malformed tool definitions.
        CapabilityError: images or tools sent to a model that does not
            support them.
    """
    if not model or not model.strip():
        raise ValidationError("model is required", provider=PROVIDER)
    sampling = coerce_sampling(params, model=model)
    wire_tools = coerce_tools(tools, model=model)

    caps = (classifier or default_classifier()).capabilities(model)
    if conversation.has_images and not caps.supports_images:
        raise CapabilityError(
            f"model {model!r} does not accept image input",
            provider=PROVIDER,
            model=model,
            capability=CAP_IMAGES,
        )
    if wire_tools and not caps.supports_tools:
        raise CapabilityError(
            f"model {model!r} does not support tool use",
            provider=PROVIDER,
            model=model,
            capability=CAP_TOOLS,
        )

    return VendorRequest(
        model=model,
        messages=conversation.messages,
        max_tokens=sampling.max_tokens,
        system=conversation.system_prompt,
        temperature=sampling.temperature,
        top_p=sampling.top_p,
        top_k=sampling.top_k,
        stop_sequences=tuple(sampling.stop_sequences) if sampling.stop_sequences else None,
        tools=wire_tools,
        stream=stream,
    )


__all__ = ["build_request", "coerce_sampling", "coerce_tools"]
