"""Shared HTTP client pool.

Purpose:
    Keep one reusable ``httpx.Client`` per ``(base_url, timeout)`` pair so
    repeated calls share connections instead of opening a pool per request.

Lifecycle:
    All pooled clients are closed at interpreter exit via ``atexit``. Tests and
    hosts may call :func:`close_all_clients` explicitly.

Timeout policy belongs to this layer: the adapter core never enforces its own
timeouts, it only forwards ``timeout_seconds`` from :class:`AdapterParams`.
"""

from __future__ import annotations

import atexit
import threading
from contextlib import suppress
from typing import Dict, Optional, Tuple

import httpx

_CLIENTS: Dict[Tuple[Optional[str], Optional[float]], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], timeout_seconds: Optional[float] = None) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and timeout.

    Parameters:
        base_url: API base URL set on the client so callers can use relative
            paths. ``None`` groups clients under a shared key.
        timeout_seconds: Client timeout. ``None`` disables httpx timeouts.

    Thread-safety:
        Safe for concurrent use; per-key creation is guarded by a re-entrant lock.
    """
    key = (base_url, timeout_seconds)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = httpx.Timeout(timeout_seconds)
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            with suppress(Exception):  # nosec B110 - shutdown path
                c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
