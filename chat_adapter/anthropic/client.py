"""AnthropicProvider adapter.

Speaks the Anthropic Messages API over a :class:`Transport` (httpx by
default) while exposing the vendor-neutral inbound contract:

* ``chat(request)`` -> :class:`AssembledResponse` (raises classified errors)
* ``stream_chat(request)`` -> iterator of :class:`ChatStreamEvent` ending in
  one terminal event
* ``stream(request)`` -> cancellable :class:`StreamController`

Configuration is resolved once at construction through
``chat_adapter.config.get_provider_config`` (defaults, config file, env,
explicit arguments) and validated into :class:`AdapterParams`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

import pydantic

from ..base.cancellation import CancellationToken
from ..base.capabilities import CapabilityClassifier, ModelCapabilities, default_classifier
from ..base.dto import AdapterParams
from ..base.errors import ValidationError
from ..base.http import HttpxTransport, Transport
from ..base.logging import get_logger
from ..base.metrics import ProviderCountersSnapshot, ProviderInvocationCounters
from ..base.models import AssembledResponse, ChatRequest
from ..base.streaming import ChatStreamEvent, StreamController
from ..config import get_provider_config
from ..config.defaults import ANTHROPIC_DEFAULT_MODEL
from .chat_helpers import chat_impl as _chat_impl
from .stream_helpers import stream_chat_impl as _stream_chat_impl

PROVIDER_NAME = "anthropic"


class AnthropicProvider:
    """Adapter for the Anthropic Messages API supporting chat and streaming.

    Parameters:
        params: Pre-built parameters. When given, configuration lookup is
            skipped and the keyword overrides below are ignored.
        api_key, model, base_url, api_version, system_prompt_mode,
        timeout_seconds: Explicit overrides applied last in the config merge.
        transport: Transport collaborator; defaults to :class:`HttpxTransport`
            created on first use.
        classifier: Capability classifier; defaults to the process-wide one.
    """

    def __init__(
        self,
        params: Optional[AdapterParams] = None,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        system_prompt_mode: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[Transport] = None,
        classifier: Optional[CapabilityClassifier] = None,
    ) -> None:
        self._params = params or self._resolve_params(
            {
                "api_key": api_key,
                "model": model,
                "base_url": base_url,
                "api_version": api_version,
                "system_prompt_mode": system_prompt_mode,
                "timeout_seconds": timeout_seconds,
            }
        )
        self._transport = transport
        self._classifier = classifier
        self._logger = get_logger("providers.anthropic")
        self._counters = ProviderInvocationCounters(provider=PROVIDER_NAME)

    @staticmethod
    def _resolve_params(overrides: Dict[str, Any]) -> AdapterParams:
        cfg = get_provider_config(PROVIDER_NAME, overrides)
        known = set(AdapterParams.model_fields)
        try:
            return AdapterParams(provider=PROVIDER_NAME, **{k: v for k, v in cfg.items() if k in known})
        except pydantic.ValidationError as exc:
            raise ValidationError(f"invalid {PROVIDER_NAME} configuration: {exc.errors()[0].get('msg')}", provider=PROVIDER_NAME) from exc

    # ---- identity / configuration ----
    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    @property
    def params(self) -> AdapterParams:
        return self._params

    def default_model(self) -> str:
        return self._params.model or ANTHROPIC_DEFAULT_MODEL

    @property
    def classifier(self) -> CapabilityClassifier:
        return self._classifier or default_classifier()

    def capabilities(self, model: Optional[str] = None) -> ModelCapabilities:
        """Capability flags for ``model`` (or the default model)."""
        return self.classifier.capabilities(model or self.default_model())

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = HttpxTransport(
                self._params.base_url or "",
                timeout_seconds=self._params.timeout_seconds,
            )
        return self._transport

    # ---- inbound contract ----
    def chat(self, request: ChatRequest) -> AssembledResponse:
        """Non-streaming call; raises the classified ``ProviderError`` on failure."""
        return _chat_impl(self, request)

    def stream_chat(
        self,
        request: ChatRequest,
        token: Optional[CancellationToken] = None,
    ) -> Iterator[ChatStreamEvent]:
        """Streaming call.

        Validation and capability errors are raised here, before any I/O.
        The returned iterator yields incremental events and always ends with
        one ``finish=True`` event. It is single-use: retrying means calling
        again.
        """
        return _stream_chat_impl(self, request, token)

    def stream(self, request: ChatRequest, token: Optional[CancellationToken] = None) -> StreamController:
        """Streaming call wrapped in a cancellable :class:`StreamController`."""
        token = token or CancellationToken()
        return StreamController(_stream_chat_impl(self, request, token), token)

    # ---- introspection ----
    def counters_snapshot(self, reset: bool = False) -> ProviderCountersSnapshot:
        """Snapshot of invocation counters for this provider instance."""
        return self._counters.snapshot(reset=reset)


__all__ = ["AnthropicProvider", "PROVIDER_NAME"]
