"""chat_adapter.config.env
=======================

Environment variable naming for provider settings.

Each provider reads ``<PROVIDER>_<SUFFIX>`` variables, e.g.
``ANTHROPIC_API_KEY`` or ``ANTHROPIC_BASE_URL``. Helpers never raise on
missing values; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

# Config field -> environment variable suffix.
ENV_FIELD_MAP: Dict[str, str] = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "api_version": "API_VERSION",
    "system_prompt_mode": "SYSTEM_PROMPT_MODE",
    "timeout_seconds": "TIMEOUT_SECONDS",
}

# Path of the optional JSON/YAML configuration file.
CONFIG_FILE_ENV = "CHAT_ADAPTER_CONFIG_FILE"


def env_var_name(provider: str, field: str) -> Optional[str]:
    """Return the environment variable name for ``field`` of ``provider``.

    >>> env_var_name("anthropic", "api_key")
    'ANTHROPIC_API_KEY'
    """
    suffix = ENV_FIELD_MAP.get(field)
    if not provider or suffix is None:
        return None
    return f"{provider.strip().upper()}_{suffix}"


def env_overrides(provider: str) -> Dict[str, str]:
    """Collect the non-empty environment values defined for ``provider``."""
    out: Dict[str, str] = {}
    for field in ENV_FIELD_MAP:
        name = env_var_name(provider, field)
        val = os.getenv(name) if name else None
        if val:
            out[field] = val
    return out


__all__ = ["ENV_FIELD_MAP", "CONFIG_FILE_ENV", "env_var_name", "env_overrides"]
