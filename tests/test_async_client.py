from __future__ import annotations

import base64
import json

import httpx
import pytest

from consulkit import APIError, AsyncConsul, TransportError


def _async_client(handler) -> AsyncConsul:  # type: ignore[no-untyped-def]
    return AsyncConsul(
        address="http://consul.test:8500",
        async_transport=httpx.MockTransport(handler),
        env={},
    )


@pytest.mark.asyncio
async def test_async_kv_round_trip() -> None:
    store: dict[str, bytes] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        key = request.url.path.removeprefix("/v1/kv/")
        if request.method == "PUT":
            store[key] = request.content
            return httpx.Response(200, json=True, request=request)
        value = base64.b64encode(store[key]).decode("ascii")
        body = [{"Key": key, "Value": value, "Flags": 0, "CreateIndex": 1, "ModifyIndex": 3}]
        return httpx.Response(200, json=body, headers={"X-Consul-Index": "3"}, request=request)

    async with _async_client(handler) as client:
        written = await client.kv.set_json("app/config", {"replicas": 3})
        read = await client.kv.read_json("app/config", dict)

    assert written.response is True
    assert json.loads(store["app/config"]) == {"replicas": 3}
    assert read.response.value == {"replicas": 3}
    assert read.index == "3"


@pytest.mark.asyncio
async def test_async_token_and_prefix() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=["dc1", "dc2"], request=request)

    client = AsyncConsul(
        address="http://consul.test:8500",
        token="secret",
        async_transport=httpx.MockTransport(handler),
        env={},
    )
    try:
        resp = await client.catalog.datacenters()
    finally:
        await client.close()

    assert resp.response == ["dc1", "dc2"]
    assert seen[0].url.path == "/v1/catalog/datacenters"
    assert seen[0].headers["x-consul-token"] == "secret"


@pytest.mark.asyncio
async def test_async_api_error() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="Permission denied", request=request)

    async with _async_client(handler) as client:
        with pytest.raises(APIError) as exc_info:
            await client.health.state("critical")

    assert exc_info.value.status_code == 403
    assert exc_info.value.api_message == "Permission denied"


@pytest.mark.asyncio
async def test_async_transport_failure() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _async_client(handler) as client:
        with pytest.raises(TransportError):
            await client.sessions.list()


@pytest.mark.asyncio
async def test_async_snapshot_save_is_raw() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\x00snapshot", request=request)

    async with _async_client(handler) as client:
        resp = await client.snapshot.save()

    assert resp.response == b"\x00snapshot"
