"""Agent service endpoints (``/agent/service*``, ``/agent/health/service``)."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from ..api.endpoint import Endpoint, Route, Typed
from ..models.check import AgentServiceCheck
from ..models.connect import ConnectProxy
from ..models.service import (
    AgentService,
    AgentServiceChecksInfo,
    AgentServiceConnect,
    AgentServiceTaggedAddress,
    AgentWeights,
)


class RegisterServiceRequest(Endpoint):
    """Register a service (and its checks) with the local agent."""

    route: ClassVar[Route] = Route("agent/service/register", method="PUT", query=("ns",))

    name: str
    address: str | None = None
    check: AgentServiceCheck | None = None
    checks: list[AgentServiceCheck] | None = None
    connect: AgentServiceConnect | None = None
    enable_tag_override: bool | None = None
    id: str | None = Field(None, alias="ID")
    kind: str | None = None
    meta: dict[str, str] | None = None
    ns: str | None = None
    port: int | None = None
    proxy: ConnectProxy | None = None
    tagged_addresses: dict[str, AgentServiceTaggedAddress] | None = None
    tags: list[str] | None = None
    weights: AgentWeights | None = None


class DeregisterServiceRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/service/deregister/{service_id}", method="PUT", query=("ns",)
    )

    service_id: str
    ns: str | None = None


class ListServicesRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/services", query=("ns",), response=Typed(dict[str, AgentService])
    )

    ns: str | None = None


class ReadServiceRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/service/{service_id}", query=("ns",), response=Typed(AgentService)
    )

    service_id: str
    ns: str | None = None


class ServiceHealthRequest(Endpoint):
    """
    Local health of every instance of a named service.

    The agent answers 503 when any instance is critical and 429 on warning,
    both with a JSON body; those surface as ``APIError``.
    """

    route: ClassVar[Route] = Route(
        "agent/health/service/name/{name}",
        query=("ns",),
        response=Typed(list[AgentServiceChecksInfo]),
    )

    name: str
    ns: str | None = None


class ServiceHealthByIdRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/health/service/id/{service_id}",
        query=("ns",),
        response=Typed(AgentServiceChecksInfo),
    )

    service_id: str
    ns: str | None = None


class EnableMaintenanceRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/service/maintenance/{service_id}",
        method="PUT",
        query=("enable", "ns", "reason"),
    )

    service_id: str
    enable: bool = True
    ns: str | None = None
    reason: str | None = None
