"""Catalog endpoints (``/catalog``)."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from ..api.endpoint import Endpoint, Route, Typed
from ..models.catalog import CatalogService, GatewayService, Node, NodeServices
from ..models.check import AgentCheck
from ..models.service import AgentService


class RegisterEntityRequest(Endpoint):
    """Register or update a node, and optionally a service and checks on it."""

    route: ClassVar[Route] = Route(
        "catalog/register", method="PUT", query=("ns",), response=Typed(bool)
    )

    node: str
    address: str
    check: AgentCheck | None = None
    checks: list[AgentCheck] | None = None
    datacenter: str | None = None
    id: str | None = Field(None, alias="ID")
    node_meta: dict[str, str] | None = None
    ns: str | None = None
    service: AgentService | None = None
    skip_node_update: bool | None = None
    tagged_addresses: dict[str, str] | None = None


class DeregisterEntityRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "catalog/deregister", method="PUT", query=("ns",), response=Typed(bool)
    )

    node: str
    check_id: str | None = Field(None, alias="CheckID")
    datacenter: str | None = None
    namespace: str | None = None
    ns: str | None = None
    service_id: str | None = Field(None, alias="ServiceID")


class ListDatacentersRequest(Endpoint):
    route: ClassVar[Route] = Route("catalog/datacenters", response=Typed(list[str]))


class ListNodesRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "catalog/nodes", query=("dc", "near"), response=Typed(list[Node])
    )

    dc: str | None = None
    near: str | None = None


class ListServicesRequest(Endpoint):
    """Service names mapped to the union of their tags."""

    route: ClassVar[Route] = Route(
        "catalog/services", query=("dc", "ns"), response=Typed(dict[str, list[str]])
    )

    dc: str | None = None
    ns: str | None = None


class ListNodesForServiceRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "catalog/service/{service}",
        query=("dc", "near", "ns", "tag"),
        response=Typed(list[CatalogService]),
    )

    service: str
    dc: str | None = None
    near: str | None = None
    ns: str | None = None
    tag: str | None = None


class ListNodesForConnectServiceRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "catalog/connect/{service}",
        query=("dc", "near", "ns", "tag"),
        response=Typed(list[CatalogService]),
    )

    service: str
    dc: str | None = None
    near: str | None = None
    ns: str | None = None
    tag: str | None = None


class ListNodeServicesRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "catalog/node-services/{node}", query=("dc", "ns"), response=Typed(NodeServices)
    )

    node: str
    dc: str | None = None
    ns: str | None = None


class ListGatewayServicesRequest(Endpoint):
    # Consul answers null for a gateway with no linked services
    route: ClassVar[Route] = Route(
        "catalog/gateway-services/{gateway}",
        query=("dc", "ns"),
        response=Typed(list[GatewayService] | None),
    )

    gateway: str
    dc: str | None = None
    ns: str | None = None
