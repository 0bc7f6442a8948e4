# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio

import httpx

from astra.config import HttpSettings
from astra.http import StubHttpClient, create_default_http_client
from astra.http.headers import normalize_headers
from astra.http.httpx_client import HttpxClient
from astra.http.models import HttpRequest, HttpResponse


def _client(handler, **settings_kwargs) -> HttpxClient:
    settings = HttpSettings(**settings_kwargs)
    return HttpxClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_httpx_client_success_normalizes_headers_and_sets_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, headers={"X-Test": "1", "Content-Type": "text/html"}, text="<html></html>")

    async def run():
        client = _client(handler, user_agent="AstraTest/1.0")
        try:
            return await client.request(HttpRequest(url="https://example.com/"))
        finally:
            await client.aclose()

    resp = asyncio.run(run())
    assert resp.ok is True
    assert resp.is_success is True
    assert resp.status_code == 200
    assert resp.text == "<html></html>"
    assert resp.headers["x-test"] == "1"
    assert resp.meta["body_truncated"] is False
    assert seen["ua"] == "AstraTest/1.0"


def test_httpx_client_truncates_body_to_limit():
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, content=b"a" * 100)

    async def run():
        client = _client(handler, max_body_bytes=10)
        try:
            return await client.request(HttpRequest(url="https://example.com/big.js"))
        finally:
            await client.aclose()

    resp = asyncio.run(run())
    assert resp.content == b"a" * 10
    assert resp.meta["body_truncated"] is True
    assert resp.meta["body_bytes_limit"] == 10


def test_httpx_client_non_2xx_is_transport_ok_but_not_success():
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(503, text="unavailable")

    async def run():
        client = _client(handler)
        try:
            return await client.request(HttpRequest(url="https://example.com/"))
        finally:
            await client.aclose()

    resp = asyncio.run(run())
    assert resp.ok is True
    assert resp.status_code == 503
    assert resp.is_success is False


def test_httpx_client_converts_exceptions():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def run():
        client = _client(handler)
        try:
            return await client.request(HttpRequest(url="https://down.example.com/"))
        finally:
            await client.aclose()

    resp = asyncio.run(run())
    assert resp.ok is False
    assert resp.status_code is None
    assert resp.url == "https://down.example.com/"
    assert resp.error_type == "ConnectError"
    assert "refused" in resp.error_message


def test_httpx_client_sends_post_body():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = request.content
        captured["key"] = request.headers.get("x-goog-api-key")
        return httpx.Response(200, json={"ok": True})

    async def run():
        client = _client(handler)
        try:
            return await client.request(
                HttpRequest(url="https://api.test/", method="POST", headers={"x-goog-api-key": "k"}, body='{"a": 1}')
            )
        finally:
            await client.aclose()

    resp = asyncio.run(run())
    assert captured == {"method": "POST", "body": b'{"a": 1}', "key": "k"}
    assert resp.json() == {"ok": True}


def test_create_default_http_client_uses_httpx():
    client = create_default_http_client(HttpSettings())
    assert isinstance(client, HttpxClient)
    asyncio.run(client.aclose())


def test_normalize_headers_lowercases_and_skips_invalid():
    headers = normalize_headers({"Content-Type": "text/html", "X-Num": 5, None: "x"})
    assert headers["content-type"] == "text/html"
    assert headers["x-num"] == "5"
    assert normalize_headers(None) == {}


def test_stub_http_client_returns_registered_responses():
    stub = StubHttpClient()
    stub.add("http://example", HttpResponse(ok=True, status_code=200, text="hello"))

    async def run():
        hit = await stub.request(HttpRequest(url="http://example"))
        miss = await stub.request(HttpRequest(url="http://missing"))
        await stub.aclose()
        return hit, miss

    hit, miss = asyncio.run(run())
    assert hit.text == "hello"
    assert miss.ok is False
    assert miss.error_message == "No stubbed response configured"
    assert stub.requested_urls == ["http://example", "http://missing"]
    assert stub.closed is True
