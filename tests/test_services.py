"""Service-layer tests against a mocked Consul agent."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from consulkit import APIError, Blocking, Consul, Features
from consulkit.models.check import AgentServiceCheck
from consulkit.models.health import CheckState


class FakeAgent:
    """Route table keyed by (method, path); records every request."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response]):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, text=f"no route for {key}", request=request)
        return self.routes[key]

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _json(payload: Any, **headers: str) -> httpx.Response:
    return httpx.Response(200, json=payload, headers=headers)


@pytest.fixture
def agent() -> FakeAgent:
    return FakeAgent({})


@pytest.fixture
def client(agent: FakeAgent):
    c = Consul(address="http://consul.test:8500", transport=httpx.MockTransport(agent), env={})
    yield c
    c.close()


# =============================================================================
# Catalog
# =============================================================================


def test_catalog_register_and_deregister(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("PUT", "/v1/catalog/register")] = _json(True)
    agent.routes[("PUT", "/v1/catalog/deregister")] = _json(True)

    assert client.catalog.register("n1", "10.0.0.1", datacenter="dc1").response is True
    assert json.loads(agent.last.content) == {
        "Node": "n1",
        "Address": "10.0.0.1",
        "Datacenter": "dc1",
    }

    assert client.catalog.deregister("n1", service_id="web-1").response is True
    assert json.loads(agent.last.content) == {"Node": "n1", "ServiceID": "web-1"}


def test_catalog_nodes_and_services(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/catalog/nodes")] = _json(
        [{"ID": "abc", "Node": "n1", "Address": "10.0.0.1", "Datacenter": "dc1"}],
        **{"X-Consul-Index": "9", "X-Consul-KnownLeader": "true"},
    )
    agent.routes[("GET", "/v1/catalog/services")] = _json({"consul": [], "web": ["primary"]})

    nodes = client.catalog.nodes(near="_agent")
    assert nodes.response[0].node == "n1"
    assert nodes.response[0].id == "abc"
    assert nodes.index == "9"
    assert agent.last.url.query.decode() == "near=_agent"

    services = client.catalog.services(dc="dc1")
    assert services.response == {"consul": [], "web": ["primary"]}


def test_catalog_service_with_filter_and_blocking(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/catalog/service/web")] = _json(
        [{"Node": "n1", "ServiceID": "web-1", "ServiceName": "web", "ServicePort": 80}]
    )
    features = Features(blocking=Blocking(index=5, wait="1s"), filter="ServicePort == 80")

    resp = client.catalog.service("web", tag="primary", features=features)

    assert resp.response[0].service_id == "web-1"
    assert agent.last.url.query.decode() == (
        "tag=primary&index=5&wait=1s&filter=ServicePort+%3D%3D+80"
    )


def test_catalog_node_services(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/catalog/node-services/n1")] = _json(
        {
            "Node": {"Node": "n1", "Address": "10.0.0.1"},
            "Services": [{"ID": "web-1", "Service": "web", "Port": 80}],
        }
    )

    resp = client.catalog.node_services("n1")

    assert resp.response.node is not None
    assert resp.response.node.address == "10.0.0.1"
    assert resp.response.services[0].service == "web"


# =============================================================================
# Health
# =============================================================================


def test_health_service_entries(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/health/service/web")] = _json(
        [
            {
                "Node": {"Node": "n1"},
                "Service": {"ID": "web-1", "Service": "web"},
                "Checks": [
                    {"CheckID": "serfHealth", "Status": "passing"},
                    {"CheckID": "service:web-1", "Status": "warning"},
                ],
            }
        ]
    )

    resp = client.health.service("web", passing=False, tag="primary")

    entry = resp.response[0]
    assert entry.service is not None and entry.service.id == "web-1"
    assert entry.aggregated_status == "warning"
    assert agent.last.url.query.decode() == "passing=false&tag=primary"


def test_health_state(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/health/state/critical")] = _json(
        [{"CheckID": "mem", "Status": "critical", "Node": "n1"}]
    )

    resp = client.health.state(CheckState.CRITICAL)

    assert resp.response[0].check_id == "mem"


# =============================================================================
# Agent checks
# =============================================================================


def test_check_register_and_ttl_updates(agent: FakeAgent, client: Consul) -> None:
    for path in (
        "/v1/agent/check/register",
        "/v1/agent/check/pass/mem",
        "/v1/agent/check/fail/mem",
        "/v1/agent/check/update/mem",
    ):
        agent.routes[("PUT", path)] = httpx.Response(200)

    assert client.checks.register("mem", id="mem", ttl="30s").response is None
    assert json.loads(agent.last.content) == {"Name": "mem", "ID": "mem", "TTL": "30s"}

    client.checks.ttl_pass("mem", note="ok")
    assert agent.last.url.query.decode() == "note=ok"

    client.checks.ttl_fail("mem")
    assert agent.last.url.query.decode() == ""

    client.checks.ttl_update("mem", status="warning", output="high")
    assert json.loads(agent.last.content) == {"Status": "warning", "Output": "high"}


def test_check_list_is_keyed_by_id(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/agent/checks")] = _json(
        {"mem": {"CheckID": "mem", "Name": "Memory", "Status": "passing"}}
    )

    checks = client.checks.list().response

    assert checks["mem"].name == "Memory"


# =============================================================================
# Agent services
# =============================================================================


def test_service_register_with_check(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("PUT", "/v1/agent/service/register")] = httpx.Response(200)

    client.services.register(
        "web", id="web-1", port=8080, meta={"v": "2"}, check=AgentServiceCheck(ttl="10s")
    )

    assert json.loads(agent.last.content) == {
        "Name": "web",
        "ID": "web-1",
        "Port": 8080,
        "Meta": {"v": "2"},
        "Check": {"TTL": "10s"},
    }


def test_service_list_and_read(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/agent/services")] = _json(
        {"web-1": {"ID": "web-1", "Service": "web", "Tags": ["a"]}}
    )
    agent.routes[("GET", "/v1/agent/service/web-1")] = _json(
        {"ID": "web-1", "Service": "web", "ContentHash": "abc"}
    )

    assert client.services.list().response["web-1"].tags == ["a"]
    assert client.services.read("web-1").response.content_hash == "abc"


def test_service_health_by_id_critical_is_api_error(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/agent/health/service/id/web-1")] = httpx.Response(
        503, json={"AggregatedStatus": "critical", "Checks": []}
    )

    with pytest.raises(APIError) as exc_info:
        client.services.health_by_id("web-1")

    assert exc_info.value.status_code == 503


def test_service_health_by_id_passing(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/agent/health/service/id/web-1")] = _json(
        {"AggregatedStatus": "passing", "Service": {"ID": "web-1"}, "Checks": []}
    )

    info = client.services.health_by_id("web-1").response

    assert info.aggregated_status == "passing"
    assert info.service is not None and info.service.id == "web-1"


def test_service_maintenance(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("PUT", "/v1/agent/service/maintenance/web-1")] = httpx.Response(200)

    client.services.maintenance("web-1", reason="deploy")

    assert agent.last.url.query.decode() == "enable=true&reason=deploy"


# =============================================================================
# Sessions
# =============================================================================


def test_session_lifecycle(agent: FakeAgent, client: Consul) -> None:
    session = {"ID": "s-1", "Name": "lock", "Node": "n1", "TTL": "15s", "LockDelay": 15000000000}
    agent.routes[("PUT", "/v1/session/create")] = _json({"ID": "s-1"})
    agent.routes[("GET", "/v1/session/info/s-1")] = _json([session])
    agent.routes[("PUT", "/v1/session/renew/s-1")] = _json([session])
    agent.routes[("PUT", "/v1/session/destroy/s-1")] = _json(True)

    created = client.sessions.create(name="lock", ttl="15s", behavior="delete")
    assert created.response.id == "s-1"
    assert json.loads(agent.last.content) == {"Behavior": "delete", "Name": "lock", "TTL": "15s"}

    info = client.sessions.info("s-1").response
    assert info[0].lock_delay == 15000000000

    assert client.sessions.renew("s-1").response[0].ttl == "15s"
    assert client.sessions.destroy("s-1").response is None


def test_session_info_unknown_is_empty_list(agent: FakeAgent, client: Consul) -> None:
    agent.routes[("GET", "/v1/session/info/gone")] = _json([])

    assert client.sessions.info("gone").response == []


# =============================================================================
# Snapshot
# =============================================================================


def test_snapshot_save_and_restore(agent: FakeAgent, client: Consul) -> None:
    archive = b"\x1f\x8b\x08\x00archive-bytes"
    agent.routes[("GET", "/v1/snapshot")] = httpx.Response(
        200, content=archive, headers={"X-Consul-Index": "77"}
    )
    agent.routes[("PUT", "/v1/snapshot")] = httpx.Response(200)

    saved = client.snapshot.save(stale=True)
    assert saved.response == archive
    assert saved.index == "77"
    assert agent.last.url.query.decode() == "stale=true"

    client.snapshot.restore(saved.response, dc="dc1")
    assert agent.last.content == archive
    assert agent.last.url.query.decode() == "dc=dc1"
