"""Tests for the httpx origin client using httpx.MockTransport."""

import httpx
import pytest

from offline_cache.entities import RequestEntity
from offline_cache.errors import OriginUnreachable
from offline_cache.protocols import OriginClient
from offline_cache.repositories import HttpxOriginClient


def make_client(handler) -> HttpxOriginClient:
    return HttpxOriginClient(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        timeout=1.0,
    )


def test_satisfies_protocol():
    assert isinstance(make_client(lambda request: httpx.Response(200)), OriginClient)


@pytest.mark.asyncio
async def test_fetch_maps_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"Content-Type": "text/html", "Connection": "keep-alive"},
            content=b"<h1>home</h1>",
        )

    client = make_client(handler)
    response = await client.fetch(RequestEntity(method="GET", url="http://app.test/"))

    assert response.status == 200
    assert response.body == b"<h1>home</h1>"
    assert response.headers["content-type"] == "text/html"
    assert "connection" not in response.headers
    assert "content-length" not in response.headers
    await client.aclose()


@pytest.mark.asyncio
async def test_repeated_headers_keep_every_value():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers=[
                ("Set-Cookie", "session=abc; Path=/"),
                ("Set-Cookie", "theme=dark; Expires=Wed, 21 Oct 2026 07:28:00 GMT"),
                ("Vary", "Accept"),
                ("Vary", "Cookie"),
            ],
        )

    client = make_client(handler)
    response = await client.fetch(RequestEntity(method="GET", url="http://app.test/"))

    assert response.set_cookies == (
        "session=abc; Path=/",
        "theme=dark; Expires=Wed, 21 Oct 2026 07:28:00 GMT",
    )
    assert "set-cookie" not in response.headers
    assert response.headers["vary"] == "Accept, Cookie"


@pytest.mark.asyncio
async def test_error_statuses_are_returned():
    client = make_client(lambda request: httpx.Response(404, content=b"nope"))

    response = await client.fetch(RequestEntity(method="GET", url="http://app.test/missing"))

    assert response.status == 404
    assert not response.ok


@pytest.mark.asyncio
async def test_forwards_selected_headers_and_body():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    client = make_client(handler)
    await client.fetch(
        RequestEntity(
            method="post",
            url="http://app.test/api/items",
            headers={"Content-Type": "application/json", "Host": "proxy.local", "X-Debug": "1"},
            body=b'{"a": 1}',
        )
    )

    request = seen[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["host"] == "app.test"
    assert "x-debug" not in request.headers
    assert request.content == b'{"a": 1}'


@pytest.mark.asyncio
async def test_connect_error_raises_origin_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(OriginUnreachable) as exc_info:
        await client.fetch(RequestEntity(method="GET", url="http://app.test/"))

    assert exc_info.value.url == "http://app.test/"
    assert "connection refused" in str(exc_info.value)
