"""Health check models."""

from __future__ import annotations

from pydantic import Field

from .base import ConsulModel


class HealthCheckDefinition(ConsulModel):
    body: str | None = None
    deregister_critical_service_after_duration: str | None = None
    header: dict[str, list[str]] | None = None
    http: str | None = Field(None, alias="HTTP")
    interval_duration: str | None = None
    method: str | None = None
    tcp: str | None = Field(None, alias="TCP")
    timeout_duration: str | None = None
    tls_server_name: str | None = Field(None, alias="TLSServerName")
    tls_skip_verify: bool | None = Field(None, alias="TLSSkipVerify")


class HealthCheck(ConsulModel):
    """A check as reported by the catalog and health endpoints."""

    check_id: str | None = Field(None, alias="CheckID")
    create_index: int | None = None
    definition: HealthCheckDefinition | None = None
    modify_index: int | None = None
    name: str | None = None
    namespace: str | None = None
    node: str | None = None
    notes: str | None = None
    output: str | None = None
    service_id: str | None = Field(None, alias="ServiceID")
    service_name: str | None = None
    service_tags: list[str] | None = None
    status: str | None = None
    type: str | None = None


class AgentCheck(HealthCheck):
    """A check registered on the local agent (``/agent/checks``)."""

    exposed_port: int | None = None


class AgentServiceCheck(ConsulModel):
    """Check definition embedded in a service registration."""

    alias_node: str | None = None
    alias_service: str | None = None
    args: list[str] | None = None
    body: str | None = None
    check_id: str | None = Field(None, alias="CheckID")
    deregister_critical_service_after: str | None = None
    docker_container_id: str | None = Field(None, alias="DockerContainerID")
    failures_before_critical: int | None = None
    grpc: str | None = Field(None, alias="GRPC")
    grpc_use_tls: bool | None = Field(None, alias="GRPCUseTLS")
    h2_ping: str | None = Field(None, alias="H2PING")
    header: dict[str, list[str]] | None = None
    http: str | None = Field(None, alias="HTTP")
    interval: str | None = None
    method: str | None = None
    name: str | None = None
    notes: str | None = None
    shell: str | None = None
    status: str | None = None
    success_before_passing: int | None = None
    tcp: str | None = Field(None, alias="TCP")
    timeout: str | None = None
    tls_server_name: str | None = Field(None, alias="TLSServerName")
    tls_skip_verify: bool | None = Field(None, alias="TLSSkipVerify")
    ttl: str | None = Field(None, alias="TTL")
