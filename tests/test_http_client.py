from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

import httpx
import pytest

from consulkit import (
    APIError,
    Consul,
    DeserializationError,
    EmptyResponseError,
    Endpoint,
    Features,
    Raw,
    Route,
    TransportError,
    Typed,
)
from consulkit.clients.http import classify, decode_typed, encode_query
from consulkit.endpoints.kv import ReadKeyRequest, ReadRawKeyRequest
from consulkit.endpoints.snapshot import GenerateSnapshotRequest
from consulkit.models.kv import KVPair
from consulkit.models.service import AgentService

ADDRESS = "http://consul.test:8500"


def _client(handler: Callable[[httpx.Request], httpx.Response], **options: object) -> Consul:
    return Consul(
        address=ADDRESS,
        transport=httpx.MockTransport(handler),
        env={},
        **options,  # type: ignore[arg-type]
    )


# =============================================================================
# Request building
# =============================================================================


def test_request_has_version_prefix_query_and_user_agent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[], request=request)

    client = _client(handler)
    try:
        client.kv.keys("app/", dc="dc1")
    finally:
        client.close()

    req = seen[0]
    assert req.method == "GET"
    assert req.url.path == "/v1/kv/app/"
    assert req.url.query.decode() == "dc=dc1&keys=true"
    assert req.headers["user-agent"].startswith("consulkit/")
    assert "x-consul-token" not in req.headers


def test_token_sent_once() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=["dc1"], request=request)

    client = _client(handler, token="secret")
    try:
        client.catalog.datacenters()
    finally:
        client.close()

    assert seen[0].headers.get_list("x-consul-token") == ["secret"]


@pytest.mark.parametrize(
    "options",
    [{"token": "s\u00e9cret"}, {}],
    ids=["token", "cache-control"],
)
def test_non_ascii_header_value_is_transport_error(options: dict[str, str]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail("no request expected")

    client = _client(handler, **options)
    features = None if options else Features(cached="max-age=\u00e9")
    try:
        with pytest.raises(TransportError):
            client.catalog.datacenters(features=features)
    finally:
        client.close()


def test_api_version_setting_changes_prefix() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[], request=request)

    client = _client(handler, version=2)
    try:
        client.catalog.datacenters()
    finally:
        client.close()

    assert seen == ["/v2/catalog/datacenters"]


def test_encode_query_keeps_order_and_bare_keys() -> None:
    assert encode_query([("index", "5"), ("filter", 'Node == "a b"'), ("stale", None)]) == (
        "index=5&filter=Node+%3D%3D+%22a+b%22&stale"
    )


def test_path_values_are_quoted() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        return httpx.Response(200, content=b"x", request=request)

    client = _client(handler)
    try:
        client.execute_raw(ReadRawKeyRequest(key="a b/c?d"))
    finally:
        client.close()

    assert seen[0].startswith("/v1/kv/a%20b/c%3Fd?")


# =============================================================================
# Response metadata
# =============================================================================


def test_metadata_parsed_for_empty_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={
                "X-Consul-Index": "100",
                "X-Consul-KnownLeader": "true",
                "X-Consul-LastContact": "0",
                "X-Cache": "HIT",
            },
            request=request,
        )

    client = _client(handler)
    try:
        resp = client.services.deregister("web-1")
    finally:
        client.close()

    assert resp.response is None
    assert resp.index == "100"
    assert resp.known_leader == "true"
    assert resp.last_contact == "0"
    assert resp.cache == "HIT"
    assert resp.content_hash is None
    assert resp.metadata() == {
        "cache": "HIT",
        "index": "100",
        "known_leader": "true",
        "last_contact": "0",
    }


def test_metadata_absent_headers_are_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["dc1"], request=request)

    client = _client(handler)
    try:
        resp = client.catalog.datacenters()
    finally:
        client.close()

    assert resp.response == ["dc1"]
    assert resp.metadata() == {}


# =============================================================================
# Error classification
# =============================================================================


def test_non_2xx_becomes_api_error_with_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="no such key", request=request)

    client = _client(handler)
    try:
        with pytest.raises(APIError) as exc_info:
            client.kv.read("missing")
    finally:
        client.close()

    assert exc_info.value.status_code == 500
    assert exc_info.value.api_message == "no such key"
    assert exc_info.value.is_server_error


def test_404_with_empty_body_has_no_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, request=request)

    client = _client(handler)
    try:
        with pytest.raises(APIError) as exc_info:
            client.kv.read("missing")
    finally:
        client.close()

    assert exc_info.value.status_code == 404
    assert exc_info.value.api_message is None
    assert exc_info.value.is_client_error


def test_redirects_are_not_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(307, headers={"Location": "http://leader:8500/"}, request=request)

    client = _client(handler)
    try:
        with pytest.raises(APIError) as exc_info:
            client.catalog.datacenters()
    finally:
        client.close()

    assert exc_info.value.status_code == 307


def test_connection_failure_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    try:
        with pytest.raises(TransportError) as exc_info:
            client.catalog.datacenters()
    finally:
        client.close()

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_non_json_body_becomes_deserialization_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy error</html>", request=request)

    client = _client(handler)
    try:
        with pytest.raises(DeserializationError):
            client.catalog.datacenters()
    finally:
        client.close()


def test_empty_body_for_typed_endpoint_is_empty_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"", request=request)

    client = _client(handler)
    try:
        with pytest.raises(EmptyResponseError):
            client.catalog.datacenters()
    finally:
        client.close()


def test_classify_passes_consul_errors_through() -> None:
    original = EmptyResponseError("nothing")
    assert classify(original) is original


def test_classify_wraps_other_exceptions() -> None:
    cause = httpx.ReadTimeout("timed out")
    error = classify(cause)
    assert isinstance(error, TransportError)
    assert error.__cause__ is cause


# =============================================================================
# Typed decoding
# =============================================================================


def test_decode_typed_null_for_model_is_empty_response() -> None:
    with pytest.raises(EmptyResponseError):
        decode_typed(KVPair, b"null")


def test_decode_typed_empty_object_for_model_is_empty_response() -> None:
    with pytest.raises(EmptyResponseError):
        decode_typed(AgentService, b"{}")
    with pytest.raises(EmptyResponseError):
        decode_typed(AgentService, b"[]")


def test_decode_typed_empty_collections_are_values() -> None:
    assert decode_typed(dict[str, AgentService], b"{}") == {}
    assert decode_typed(list[KVPair], b"[]") == []


def test_decode_typed_wrong_shape_is_deserialization_error() -> None:
    with pytest.raises(DeserializationError):
        decode_typed(list[str], b'{"a": 1}')


def test_decode_typed_optional_accepts_null() -> None:
    assert decode_typed(list[str] | None, b"null") is None


# =============================================================================
# Execution by shape
# =============================================================================


class _PingRequest(Endpoint):
    route: ClassVar[Route] = Route("status/leader", response=Raw())


def test_execute_typed_requires_typed_shape() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail("no request expected")

    client = _client(handler)
    try:
        with pytest.raises(ValueError):
            client.execute_typed(_PingRequest())
    finally:
        client.close()


def test_execute_dispatches_on_shape() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/snapshot":
            return httpx.Response(200, content=b"\x00\x01archive", request=request)
        return httpx.Response(
            200,
            json=[{"Key": "a", "Value": "aGk=", "Flags": 0, "CreateIndex": 1, "ModifyIndex": 2}],
            request=request,
        )

    client = _client(handler)
    try:
        raw = client.execute(GenerateSnapshotRequest())
        typed = client.execute(ReadKeyRequest(key="a"))
    finally:
        client.close()

    assert raw.response == b"\x00\x01archive"
    assert isinstance(typed.response[0], KVPair)
    assert typed.response[0].decoded_value() == b"hi"


def test_custom_endpoint_definition() -> None:
    class LeaderRequest(Endpoint):
        route: ClassVar[Route] = Route("status/leader", response=Typed(str))

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/status/leader"
        return httpx.Response(200, json="10.0.0.1:8300", request=request)

    client = _client(handler)
    try:
        assert client.execute_typed(LeaderRequest()).response == "10.0.0.1:8300"
    finally:
        client.close()
