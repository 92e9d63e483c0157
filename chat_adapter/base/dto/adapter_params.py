"""Typed parameter object for provider adapter initialization.

Purpose
-------
Capture the configuration surface the adapter consumes (credential, endpoint,
API version) plus a few transport hints, so the provider constructor has one
validated argument instead of a long keyword list.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()`` convenience.

Notes
-----
- ``api_key``, ``base_url`` and ``api_version`` are opaque strings passed
  through to the transport. The adapter only requires non-empty presence of
  the key and version before a send.
- ``timeout_seconds`` belongs to the transport collaborator; the adapter core
  enforces no timeouts of its own.
"""
from __future__ import annotations

from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

SystemPromptMode = Literal["channel", "leading_user_turn"]


class AdapterParams(BaseModel):
    """Provider adapter initialization parameters.

    Attributes
    ----------
    provider:
        Canonical provider name (e.g., ``"anthropic"``).
    model:
        Default model identifier used when a request leaves it empty.
    api_key:
        Vendor credential.
    base_url:
        Optional alternate base endpoint (proxies, gateways).
    api_version:
        Vendor API version string sent with every request.
    system_prompt_mode:
        ``"channel"`` (default) sends system text in the dedicated system
        field; ``"leading_user_turn"`` is the explicit fallback for vendors
        without one.
    timeout_seconds:
        Transport timeout for the default httpx transport. ``None`` disables it.
    headers:
        Optional static HTTP headers added to every request.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    api_version: Optional[str] = None
    system_prompt_mode: SystemPromptMode = "channel"
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    headers: Mapping[str, str] = Field(default_factory=dict)


__all__ = ["AdapterParams", "SystemPromptMode"]
