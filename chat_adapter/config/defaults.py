"""chat_adapter.config.defaults
============================

Central place for small, stable default values. These can be overridden via
environment variables or the external configuration file, but provide sane
fallbacks for local development and tests.

This module performs no I/O and imports nothing from the rest of the package,
so any layer may depend on it without import cycles.
"""

from __future__ import annotations

from typing import Dict, List

# ---- Anthropic wire defaults ----
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_DEFAULT_API_VERSION = "2023-06-01"
ANTHROPIC_MESSAGES_PATH = "/v1/messages"
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5"

# How system messages reach the vendor: "channel" or "leading_user_turn".
DEFAULT_SYSTEM_PROMPT_MODE = "channel"

# Transport timeout (seconds) for the default httpx transport.
DEFAULT_HTTP_TIMEOUT_SECONDS = 600.0

# Separator used when several system messages are folded into one prompt.
SYSTEM_PROMPT_SEPARATOR = "\n\n"


# ---- Model capability tables ----
# Shell-style patterns matched case-insensitively against the model id.
# Exclusions win over inclusions; ids matching no inclusion get neither
# capability. New model ids only require edits here (or in the external
# config file's ``capabilities`` section), never code changes.
CAPABILITY_PATTERNS: Dict[str, Dict[str, List[str]]] = {
    "images": {
        "include": [
            "claude-3-*",
            "claude-3.5-*",
            "claude-3.7-*",
            "claude-opus-4*",
            "claude-sonnet-4*",
            "claude-haiku-4*",
            "claude-4*",
        ],
        "exclude": [
            "claude-3-5-haiku*",
            "claude-3.5-haiku*",
        ],
    },
    "tools": {
        "include": [
            "claude-3-*",
            "claude-3.5-*",
            "claude-3.7-*",
            "claude-opus-4*",
            "claude-sonnet-4*",
            "claude-haiku-4*",
            "claude-4*",
        ],
        "exclude": [
            "claude-instant*",
        ],
    },
}


__all__ = [
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_API_VERSION",
    "ANTHROPIC_MESSAGES_PATH",
    "ANTHROPIC_DEFAULT_MODEL",
    "DEFAULT_SYSTEM_PROMPT_MODE",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "SYSTEM_PROMPT_SEPARATOR",
    "CAPABILITY_PATTERNS",
]
