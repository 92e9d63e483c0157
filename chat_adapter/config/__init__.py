"""Unified configuration layer.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external config file (JSON or YAML) named by
       ``CHAT_ADAPTER_CONFIG_FILE``
    3. Environment variables (``ANTHROPIC_API_KEY``, ``ANTHROPIC_BASE_URL``, ...)
    4. In-code overrides passed to :func:`get_provider_config`

External config file structure::

    anthropic:
      base_url: https://gateway.internal/anthropic
      api_version: "2023-06-01"
      system_prompt_mode: channel
    capabilities:
      images:
        include: ["claude-3-*", "claude-sonnet-4*"]
        exclude: ["claude-3-5-haiku*"]

The file is read once per process; :func:`reset_config_cache` clears it for
tests.
"""
from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_API_VERSION,
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    CAPABILITY_PATTERNS,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SYSTEM_PROMPT_MODE,
)
from .env import CONFIG_FILE_ENV, env_overrides


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "anthropic": {
        "model": ANTHROPIC_DEFAULT_MODEL,
        "base_url": ANTHROPIC_DEFAULT_BASE_URL,
        "api_version": ANTHROPIC_DEFAULT_API_VERSION,
        "system_prompt_mode": DEFAULT_SYSTEM_PROMPT_MODE,
        "timeout_seconds": DEFAULT_HTTP_TIMEOUT_SECONDS,
    },
}

_FILE_CACHE: Optional[Dict[str, Any]] = None


class ConfigurationError(ValueError):
    """Raised when the external configuration file cannot be parsed."""


def _load_external_config() -> Dict[str, Any]:
    """Load and cache the external config file (JSON first, then YAML)."""
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping at top level")
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget the cached external config file (tests, hot reload)."""
    global _FILE_CACHE
    _FILE_CACHE = None


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored so callers can pass optional
    arguments straight through.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = dict(DEFAULTS.get(name, {}))

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_capability_patterns() -> Dict[str, Dict[str, List[str]]]:
    """Return the capability pattern table: defaults overlaid by the config file.

    The file may replace the ``include`` and/or ``exclude`` list of any
    capability; capabilities it does not mention keep their defaults.
    """
    table = copy.deepcopy(CAPABILITY_PATTERNS)
    file_caps = _load_external_config().get("capabilities")
    if isinstance(file_caps, dict):
        for capability, lists in file_caps.items():
            if not isinstance(lists, dict):
                raise ConfigurationError(f"capabilities.{capability} must be a mapping")
            entry = table.setdefault(str(capability), {"include": [], "exclude": []})
            for key in ("include", "exclude"):
                if key in lists:
                    entry[key] = [str(p) for p in (lists[key] or [])]
    return table


__all__ = [
    "DEFAULTS",
    "ConfigurationError",
    "get_provider_config",
    "get_capability_patterns",
    "reset_config_cache",
]
