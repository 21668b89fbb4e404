"""Service mesh (Connect) configuration blocks shared by service models."""

from __future__ import annotations

from pydantic import Field

from .base import ConsulModel


class ExposePath(ConsulModel):
    listener_port: int | None = None
    local_path_port: int | None = None
    path: str | None = None
    parsed_from_check: bool | None = None
    protocol: str | None = None


class ExposeConfig(ConsulModel):
    checks: bool | None = None
    paths: list[ExposePath] | None = None


class MeshGatewayConfig(ConsulModel):
    mode: str | None = None


class TransparentProxyConfig(ConsulModel):
    dialed_directly: bool | None = None
    outbound_listener_port: int | None = None


class Upstream(ConsulModel):
    centrally_configured: bool | None = None
    config: dict[str, object] | None = None
    datacenter: str | None = None
    destination_name: str | None = None
    destination_namespace: str | None = None
    destination_type: str | None = None
    local_bind_address: str | None = None
    local_bind_port: int | None = None
    local_bind_socket_mode: str | None = None
    local_bind_socket_path: str | None = None
    mesh_gateway: MeshGatewayConfig | None = None


class ConnectProxy(ConsulModel):
    """Proxy configuration of a sidecar or gateway service."""

    config: dict[str, object] | None = None
    destination_service_id: str | None = Field(None, alias="DestinationServiceID")
    destination_service_name: str | None = None
    expose: ExposeConfig | None = None
    local_service_address: str | None = None
    local_service_port: int | None = None
    local_service_socket_path: str | None = None
    mesh_gateway: MeshGatewayConfig | None = None
    mode: str | None = None
    transparent_proxy: TransparentProxyConfig | None = None
    upstreams: list[Upstream] | None = None
