"""Tests for the key/value service and its JSON helpers."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable

import httpx
import pytest
from pydantic import BaseModel

from consulkit import (
    Base64DecodeError,
    Consul,
    DeserializationError,
    EmptyResponseError,
    SerializationError,
    Utf8DecodeError,
)
from consulkit.models.kv import KVPair


class Payload(BaseModel):
    field: str


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _pair(key: str, value: str | None, **extra: object) -> dict[str, object]:
    return {
        "Key": key,
        "Value": value,
        "Flags": 0,
        "CreateIndex": 10,
        "ModifyIndex": 11,
        "LockIndex": 0,
        **extra,
    }


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> Consul:
    return Consul(
        address="http://consul.test:8500", transport=httpx.MockTransport(handler), env={}
    )


def test_read_json_decodes_base64_value() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/kv/app/config"
        body = [_pair("app/config", _b64(b'{"field":"x"}'))]
        return httpx.Response(200, json=body, headers={"X-Consul-Index": "11"}, request=request)

    client = _client(handler)
    try:
        resp = client.kv.read_json("app/config", Payload)
    finally:
        client.close()

    assert resp.response.value == Payload(field="x")
    assert resp.response.key == "app/config"
    assert resp.response.modify_index == 11
    assert resp.index == "11"


def test_read_json_empty_list_is_empty_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[], request=request)

    client = _client(handler)
    try:
        with pytest.raises(EmptyResponseError):
            client.kv.read_json("app/config", Payload)
    finally:
        client.close()


def test_read_json_null_value_is_empty_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[_pair("app/config", None)], request=request)

    client = _client(handler)
    try:
        with pytest.raises(EmptyResponseError):
            client.kv.read_json("app/config", Payload)
    finally:
        client.close()


def test_read_json_invalid_base64_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[_pair("k", "not base64!")], request=request)

    client = _client(handler)
    try:
        with pytest.raises(Base64DecodeError):
            client.kv.read_json("k", Payload)
    finally:
        client.close()


def test_read_json_wrong_shape_raises_deserialization_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[_pair("k", _b64(b'{"other": 1}'))], request=request)

    client = _client(handler)
    try:
        with pytest.raises(DeserializationError):
            client.kv.read_json("k", Payload)
    finally:
        client.close()


def test_read_json_raw_uses_raw_endpoint() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b'{"field":"y"}', request=request)

    client = _client(handler)
    try:
        resp = client.kv.read_json_raw("app/config", Payload)
    finally:
        client.close()

    assert resp.response == Payload(field="y")
    assert seen[0].url.params["raw"] == "true"


def test_read_raw_returns_bytes_unchanged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\xde\xad\xbe\xef", request=request)

    client = _client(handler)
    try:
        resp = client.kv.read_raw("blob")
    finally:
        client.close()

    assert resp.response == b"\xde\xad\xbe\xef"


def test_set_json_sends_encoded_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=True, request=request)

    client = _client(handler)
    try:
        resp = client.kv.set_json("app/config", Payload(field="z"), cas=5)
    finally:
        client.close()

    assert resp.response is True
    req = seen[0]
    assert req.method == "PUT"
    assert req.url.query.decode() == "cas=5"
    assert json.loads(req.content) == {"field": "z"}


def test_set_json_unencodable_value_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail("no request expected")

    client = _client(handler)
    try:
        with pytest.raises(SerializationError):
            client.kv.set_json("k", object())
    finally:
        client.close()


def test_set_str_is_utf8_encoded() -> None:
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(200, json=True, request=request)

    client = _client(handler)
    try:
        client.kv.set("greeting", "héllo")
    finally:
        client.close()

    assert seen == ["héllo".encode()]


def test_set_bytes_body_is_unchanged() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=True, request=request)

    client = _client(handler)
    try:
        client.kv.set("blob", b"\xde\xad\xbe\xef")
    finally:
        client.close()

    assert seen[0].content == b"\xde\xad\xbe\xef"
    assert "content-type" not in seen[0].headers


def test_acquire_and_release_send_session() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.query.decode())
        return httpx.Response(200, json=not seen[-1].startswith("release"), request=request)

    client = _client(handler)
    try:
        assert client.kv.acquire("lock", "sess-1", "node-a") is True
        assert client.kv.release("lock", "sess-1") is False
    finally:
        client.close()

    assert seen == ["acquire=sess-1", "release=sess-1"]


def test_delete_recurse() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=True, request=request)

    client = _client(handler)
    try:
        assert client.kv.delete("app/", recurse=True).response is True
    finally:
        client.close()

    assert seen[0].method == "DELETE"
    assert seen[0].url.query.decode() == "recurse=true"


def test_kv_pair_text_value_rejects_invalid_utf8() -> None:
    pair = KVPair.model_validate(_pair("k", _b64(b"\xff\xfe")))
    assert pair.decoded_value() == b"\xff\xfe"
    with pytest.raises(Utf8DecodeError):
        pair.text_value()
