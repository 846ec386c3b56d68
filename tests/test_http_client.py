from __future__ import annotations

import json

import httpx
import pytest

from nicoapi.adapters.http_client import HttpxTransport, build_async_client
from nicoapi.core.config import AppSettings
from nicoapi.core.domain.models import RequestSpec

URL = "https://nvapi.nicovideo.jp/v1/users/me/mylists/7/items"


def make_transport(handler) -> HttpxTransport:
    settings = AppSettings(user_agent="nicoapi-tests/1.0")
    client = build_async_client(settings, transport=httpx.MockTransport(handler))
    return HttpxTransport(client)


async def test_default_headers_and_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"meta": {"status": 200}, "data": {}})

    transport = make_transport(handler)
    request = RequestSpec(method="GET", url=URL, params={"page": 1, "withTotalCount": True, "skip": None})

    response = await transport.send(request, {"Cookie": "user_session=abc"})

    sent = seen[0]
    assert sent.headers["User-Agent"] == "nicoapi-tests/1.0"
    assert sent.headers["x-frontend-id"] == "23"
    assert sent.headers["x-request-with"] == "nv-garage"
    assert sent.headers["Cookie"] == "user_session=abc"
    assert sent.url.params["page"] == "1"
    assert sent.url.params["withTotalCount"] == "true"
    assert "skip" not in sent.url.params
    assert response.status == 200
    assert response.body == {"meta": {"status": 200}, "data": {}}


async def test_post_sends_json_body():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"meta": {"status": 201}})

    transport = make_transport(handler)

    response = await transport.send(RequestSpec(method="POST", url=URL, params={"itemId": "sm9"}, body={}), {})

    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {}
    assert response.status == 201


async def test_get_without_body_sends_no_content():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    response = await make_transport(handler).send(RequestSpec(method="DELETE", url=URL), {})

    assert seen[0].content == b""
    assert response.body is None


async def test_error_statuses_are_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="<html>maintenance</html>")

    response = await make_transport(handler).send(RequestSpec(method="GET", url=URL), {})

    assert response.status == 503
    assert response.is_success is False
    assert response.body == "<html>maintenance</html>"


async def test_transport_exceptions_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.ConnectError):
        await make_transport(handler).send(RequestSpec(method="GET", url=URL), {})


async def test_injected_client_is_left_open():
    client = build_async_client(AppSettings(), transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    async with HttpxTransport(client):
        pass

    assert client.is_closed is False
    await client.aclose()


async def test_owned_client_is_closed():
    transport = HttpxTransport(settings=AppSettings())

    await transport.aclose()

    assert transport.client.is_closed


def test_timeout_follows_settings():
    client = build_async_client(AppSettings(http_timeout_seconds=5))

    assert client.timeout.read == 5
