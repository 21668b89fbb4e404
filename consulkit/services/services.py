"""Agent service registration and local service health."""

from __future__ import annotations

import builtins
from typing import TYPE_CHECKING, Any

from ..api.features import Features
from ..api.response import ApiResponse
from ..endpoints.service import (
    DeregisterServiceRequest,
    EnableMaintenanceRequest,
    ListServicesRequest,
    ReadServiceRequest,
    RegisterServiceRequest,
    ServiceHealthByIdRequest,
    ServiceHealthRequest,
)
from ..models.service import AgentService, AgentServiceChecksInfo

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient


class AgentServiceService:
    """
    Services registered with the local agent.

    ``health`` and ``health_by_id`` report the agent's local view. The agent
    answers 503 (critical) or 429 (warning) for unhealthy services; those
    surface as ``APIError`` with the status code set.
    """

    def __init__(self, client: HTTPClient):
        self._client = client

    def register(self, name: str, **fields: Any) -> ApiResponse[None]:
        return self._client.execute_empty(RegisterServiceRequest(name=name, **fields))

    def deregister(self, service_id: str, *, ns: str | None = None) -> ApiResponse[None]:
        return self._client.execute_empty(DeregisterServiceRequest(service_id=service_id, ns=ns))

    def list(
        self, *, ns: str | None = None, features: Features | None = None
    ) -> ApiResponse[dict[str, AgentService]]:
        return self._client.execute_typed(ListServicesRequest(ns=ns, features=features))

    def read(
        self, service_id: str, *, ns: str | None = None, features: Features | None = None
    ) -> ApiResponse[AgentService]:
        endpoint = ReadServiceRequest(service_id=service_id, ns=ns, features=features)
        return self._client.execute_typed(endpoint)

    def health(
        self, name: str, *, ns: str | None = None
    ) -> ApiResponse[builtins.list[AgentServiceChecksInfo]]:
        return self._client.execute_typed(ServiceHealthRequest(name=name, ns=ns))

    def health_by_id(
        self, service_id: str, *, ns: str | None = None
    ) -> ApiResponse[AgentServiceChecksInfo]:
        return self._client.execute_typed(ServiceHealthByIdRequest(service_id=service_id, ns=ns))

    def maintenance(
        self,
        service_id: str,
        *,
        enable: bool = True,
        reason: str | None = None,
        ns: str | None = None,
    ) -> ApiResponse[None]:
        endpoint = EnableMaintenanceRequest(
            service_id=service_id, enable=enable, reason=reason, ns=ns
        )
        return self._client.execute_empty(endpoint)


class AsyncAgentServiceService:
    """Async version of ``AgentServiceService``."""

    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def register(self, name: str, **fields: Any) -> ApiResponse[None]:
        return await self._client.execute_empty(RegisterServiceRequest(name=name, **fields))

    async def deregister(self, service_id: str, *, ns: str | None = None) -> ApiResponse[None]:
        return await self._client.execute_empty(
            DeregisterServiceRequest(service_id=service_id, ns=ns)
        )

    async def list(
        self, *, ns: str | None = None, features: Features | None = None
    ) -> ApiResponse[dict[str, AgentService]]:
        return await self._client.execute_typed(ListServicesRequest(ns=ns, features=features))

    async def read(
        self, service_id: str, *, ns: str | None = None, features: Features | None = None
    ) -> ApiResponse[AgentService]:
        endpoint = ReadServiceRequest(service_id=service_id, ns=ns, features=features)
        return await self._client.execute_typed(endpoint)

    async def health(
        self, name: str, *, ns: str | None = None
    ) -> ApiResponse[builtins.list[AgentServiceChecksInfo]]:
        return await self._client.execute_typed(ServiceHealthRequest(name=name, ns=ns))

    async def health_by_id(
        self, service_id: str, *, ns: str | None = None
    ) -> ApiResponse[AgentServiceChecksInfo]:
        return await self._client.execute_typed(
            ServiceHealthByIdRequest(service_id=service_id, ns=ns)
        )

    async def maintenance(
        self,
        service_id: str,
        *,
        enable: bool = True,
        reason: str | None = None,
        ns: str | None = None,
    ) -> ApiResponse[None]:
        endpoint = EnableMaintenanceRequest(
            service_id=service_id, enable=enable, reason=reason, ns=ns
        )
        return await self._client.execute_empty(endpoint)
