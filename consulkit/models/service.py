"""Agent and catalog service models."""

from __future__ import annotations

from pydantic import Field

from .base import ConsulModel
from .check import AgentServiceCheck, HealthCheck
from .connect import ConnectProxy


class AgentWeights(ConsulModel):
    passing: int | None = None
    warning: int | None = None


class AgentServiceTaggedAddress(ConsulModel):
    address: str | None = None
    port: int | None = None


class AgentServiceRegistration(ConsulModel):
    """Nested registration, used for sidecar services."""

    address: str | None = None
    check: AgentServiceCheck | None = None
    checks: list[AgentServiceCheck] | None = None
    connect: AgentServiceConnect | None = None
    enable_tag_override: bool | None = None
    id: str | None = Field(None, alias="ID")
    kind: str | None = None
    meta: dict[str, str] | None = None
    name: str | None = None
    namespace: str | None = None
    port: int | None = None
    proxy: ConnectProxy | None = None
    tagged_addresses: dict[str, AgentServiceTaggedAddress] | None = None
    tags: list[str] | None = None
    weights: AgentWeights | None = None


class AgentServiceConnect(ConsulModel):
    native: bool | None = None
    sidecar_service: AgentServiceRegistration | None = None


AgentServiceRegistration.model_rebuild()


class AgentService(ConsulModel):
    """A service as known to an agent or stored in the catalog."""

    address: str | None = None
    connect: AgentServiceConnect | None = None
    content_hash: str | None = None
    create_index: int | None = None
    datacenter: str | None = None
    enable_tag_override: bool | None = None
    id: str | None = Field(None, alias="ID")
    kind: str | None = None
    meta: dict[str, str] | None = None
    modify_index: int | None = None
    namespace: str | None = None
    port: int | None = None
    proxy: ConnectProxy | None = None
    service: str | None = None
    socket_path: str | None = None
    tagged_addresses: dict[str, AgentServiceTaggedAddress] | None = None
    tags: list[str] | None = None
    weights: AgentWeights | None = None


class AgentServiceChecksInfo(ConsulModel):
    """Local agent view of a service and its checks."""

    aggregated_status: str | None = None
    checks: list[HealthCheck] = Field(default_factory=list)
    service: AgentService | None = None
