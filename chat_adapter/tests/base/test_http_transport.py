"""HttpxTransport against httpx.MockTransport, plus the shared client pool."""
from __future__ import annotations

import json

import httpx

from chat_adapter.base.http import HttpxTransport, close_all_clients, get_httpx_client


def setup_function(_):
    close_all_clients()


def teardown_function(_):
    close_all_clients()


def test_pool_returns_same_instance_per_key():
    c1 = get_httpx_client("https://api.example.com", 30.0)
    c2 = get_httpx_client("https://api.example.com", 30.0)
    c3 = get_httpx_client("https://api.other.com", 30.0)
    assert c1 is c2  # nosec B101
    assert c1 is not c3  # nosec B101


def test_pool_replaces_closed_clients():
    c1 = get_httpx_client("https://api.example.com")
    c1.close()
    assert get_httpx_client("https://api.example.com") is not c1  # nosec B101


def test_httpx_transport_posts_and_streams_bytes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = dict(request.headers)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, headers={"request-id": "req_9"}, content=b"event: ping\ndata: {}\n\n")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = HttpxTransport("https://api.example.com/", client=client)
    resp = transport.open("/v1/messages", b'{"model":"m"}', {"x-api-key": "k"})
    try:
        assert resp.status_code == 200  # nosec B101
        assert resp.headers["request-id"] == "req_9"  # nosec B101
        assert b"".join(resp.iter_bytes()) == b"event: ping\ndata: {}\n\n"  # nosec B101
    finally:
        resp.close()
        resp.close()
    assert resp.closed  # nosec B101
    assert seen["url"] == "https://api.example.com/v1/messages"  # nosec B101
    assert seen["headers"]["x-api-key"] == "k"  # nosec B101
    assert seen["body"] == {"model": "m"}  # nosec B101
    client.close()


def test_httpx_transport_read_error_body():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(401, json={"type": "error"})))
    resp = HttpxTransport("https://api.example.com", client=client).open("/v1/messages", b"{}", {})
    assert resp.status_code == 401  # nosec B101
    assert json.loads(resp.read()) == {"type": "error"}  # nosec B101
    resp.close()
    client.close()
