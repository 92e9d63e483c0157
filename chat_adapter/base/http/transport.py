"""Transport collaborator contract and its httpx implementation.

The adapter core only needs "send bytes, receive a byte stream": it builds the
JSON body and headers itself and hands them to a :class:`Transport`. Anything
below that line (proxies, connection pooling, TLS, timeouts) belongs to the
transport. Tests substitute a scripted fake that satisfies the same Protocol.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Optional, Protocol, runtime_checkable

import httpx

from .client import get_httpx_client


@runtime_checkable
class TransportResponse(Protocol):
    """An open HTTP response. Must be closed exactly once by its consumer."""

    @property
    def status_code(self) -> int: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    def iter_bytes(self) -> Iterator[bytes]: ...

    def read(self) -> bytes: ...

    def close(self) -> None: ...


@runtime_checkable
class Transport(Protocol):
    """POST a request body and return the (possibly streaming) response."""

    def open(self, path: str, body: bytes, headers: Mapping[str, str]) -> TransportResponse: ...


class HttpxResponse:
    """Adapts a streamed ``httpx.Response`` to :class:`TransportResponse`."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    def iter_bytes(self) -> Iterator[bytes]:
        yield from self._response.iter_bytes()

    def read(self) -> bytes:
        return self._response.read()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._response.close()


class HttpxTransport:
    """Default transport over a pooled ``httpx.Client``.

    Parameters:
        base_url: Vendor base endpoint (e.g. ``https://api.anthropic.com``).
        timeout_seconds: Client timeout; ``None`` disables it.
        client: Explicit client to use instead of the shared pool (tests pass
            one built on ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or get_httpx_client(self._base_url, timeout_seconds)

    @property
    def base_url(self) -> str:
        return self._base_url

    def open(self, path: str, body: bytes, headers: Mapping[str, str]) -> HttpxResponse:
        """Send the POST and return once response headers have arrived.

        Connection failures surface as ``httpx.TransportError`` subclasses and
        are classified by the caller.
        """
        url = f"{self._base_url}{path}"
        request = self._client.build_request("POST", url, content=body, headers=dict(headers))
        response = self._client.send(request, stream=True)
        return HttpxResponse(response)


__all__ = ["Transport", "TransportResponse", "HttpxResponse", "HttpxTransport"]
