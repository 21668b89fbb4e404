"""Catalog models."""

from __future__ import annotations

from pydantic import Field

from .base import ConsulModel
from .connect import ConnectProxy
from .service import AgentService, AgentServiceConnect, AgentWeights


class Node(ConsulModel):
    address: str | None = None
    create_index: int | None = None
    datacenter: str | None = None
    id: str | None = Field(None, alias="ID")
    meta: dict[str, str] | None = None
    modify_index: int | None = None
    node: str | None = None
    tagged_addresses: dict[str, str] | None = None


class CatalogService(ConsulModel):
    """One instance of a service on a node, as stored in the catalog."""

    address: str | None = None
    create_index: int | None = None
    datacenter: str | None = None
    id: str | None = Field(None, alias="ID")
    modify_index: int | None = None
    namespace: str | None = None
    node: str | None = None
    node_meta: dict[str, str] | None = None
    service_address: str | None = None
    service_connect: AgentServiceConnect | None = None
    service_enable_tag_override: bool | None = None
    service_id: str | None = Field(None, alias="ServiceID")
    service_kind: str | None = None
    service_meta: dict[str, str] | None = None
    service_name: str | None = None
    service_port: int | None = None
    service_proxy: ConnectProxy | None = None
    service_socket_path: str | None = None
    service_tags: list[str] | None = None
    service_weights: AgentWeights | None = None
    tagged_addresses: dict[str, str] | None = None


class NodeServices(ConsulModel):
    node: Node | None = None
    services: list[AgentService] = Field(default_factory=list)


class CompoundServiceName(ConsulModel):
    name: str
    namespace: str | None = None


class GatewayService(ConsulModel):
    """A service linked to a terminating or ingress gateway."""

    ca_file: str | None = Field(None, alias="CAFile")
    cert_file: str | None = None
    from_wildcard: bool | None = None
    gateway: CompoundServiceName
    gateway_kind: str | None = None
    hosts: list[str] | None = None
    key_file: str | None = None
    port: int | None = None
    protocol: str | None = None
    service: CompoundServiceName
    sni: str | None = Field(None, alias="SNI")
