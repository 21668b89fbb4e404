"""Agent check endpoints (``/agent/check*``)."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from ..api.endpoint import Endpoint, Route, Typed
from ..models.check import AgentCheck


class RegisterCheckRequest(Endpoint):
    """
    Register a check with the local agent.

    Exactly one of the check kinds (``args``, ``http``, ``tcp``, ``ttl``,
    ``grpc``, ``h2_ping``, ``alias_*``, ...) should be set; the agent validates
    the combination.
    """

    route: ClassVar[Route] = Route("agent/check/register", method="PUT")

    name: str
    alias_node: str | None = None
    alias_service: str | None = None
    args: list[str] | None = None
    body: str | None = None
    deregister_critical_service_after: str | None = None
    docker_container_id: str | None = Field(None, alias="DockerContainerID")
    failures_before_critical: int | None = None
    grpc: str | None = Field(None, alias="GRPC")
    grpc_use_tls: bool | None = Field(None, alias="GRPCUseTLS")
    h2_ping: str | None = Field(None, alias="H2PING")
    header: dict[str, list[str]] | None = None
    http: str | None = Field(None, alias="HTTP")
    id: str | None = Field(None, alias="ID")
    interval: str | None = None
    method: str | None = None
    namespace: str | None = None
    notes: str | None = None
    output_max_size: int | None = None
    service_id: str | None = Field(None, alias="ServiceID")
    status: str | None = None
    success_before_passing: int | None = None
    tcp: str | None = Field(None, alias="TCP")
    timeout: str | None = None
    tls_server_name: str | None = Field(None, alias="TLSServerName")
    tls_skip_verify: bool | None = Field(None, alias="TLSSkipVerify")
    ttl: str | None = Field(None, alias="TTL")


class DeregisterCheckRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/check/deregister/{check_id}", method="PUT", query=("ns",)
    )

    check_id: str
    ns: str | None = None


class TtlCheckPassRequest(Endpoint):
    route: ClassVar[Route] = Route("agent/check/pass/{check_id}", method="PUT", query=("note",))

    check_id: str
    note: str | None = None


class TtlCheckWarnRequest(Endpoint):
    route: ClassVar[Route] = Route("agent/check/warn/{check_id}", method="PUT", query=("note",))

    check_id: str
    note: str | None = None


class TtlCheckFailRequest(Endpoint):
    route: ClassVar[Route] = Route("agent/check/fail/{check_id}", method="PUT", query=("note",))

    check_id: str
    note: str | None = None


class TtlCheckUpdateRequest(Endpoint):
    """Set a TTL check's status and output in one call."""

    route: ClassVar[Route] = Route("agent/check/update/{check_id}", method="PUT")

    check_id: str
    status: Literal["passing", "warning", "critical"] | None = None
    output: str | None = None


class ListChecksRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "agent/checks", query=("ns",), response=Typed(dict[str, AgentCheck])
    )

    ns: str | None = None
