"""HTTP transport layer (httpx)."""

from .client import close_all_clients, get_httpx_client
from .transport import HttpxResponse, HttpxTransport, Transport, TransportResponse

__all__ = [
    "close_all_clients",
    "get_httpx_client",
    "HttpxResponse",
    "HttpxTransport",
    "Transport",
    "TransportResponse",
]
