"""Health service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..api.features import Features
from ..api.response import ApiResponse
from ..endpoints.health import (
    ListChecksInStateRequest,
    ListNodeChecksRequest,
    ListNodesForServiceRequest,
    ListServiceChecksRequest,
)
from ..models.check import HealthCheck
from ..models.health import CheckState, ServiceEntry

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient


class HealthService:
    def __init__(self, client: HTTPClient):
        self._client = client

    def service(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[ServiceEntry]]:
        """
        Instances of ``service`` with node and check details.

        Options: ``dc``, ``near``, ``ns``, ``passing``, ``peer``, ``tag``.
        Use ``Features(filter=...)`` to filter server-side.
        """
        endpoint = ListNodesForServiceRequest(service=service, features=features, **options)
        return self._client.execute_typed(endpoint)

    def node(
        self, node: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[HealthCheck]]:
        endpoint = ListNodeChecksRequest(node=node, features=features, **options)
        return self._client.execute_typed(endpoint)

    def checks(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[HealthCheck]]:
        endpoint = ListServiceChecksRequest(service=service, features=features, **options)
        return self._client.execute_typed(endpoint)

    def state(
        self,
        state: CheckState | str = CheckState.ANY,
        *,
        features: Features | None = None,
        **options: Any,
    ) -> ApiResponse[list[HealthCheck]]:
        endpoint = ListChecksInStateRequest(state=state, features=features, **options)
        return self._client.execute_typed(endpoint)


class AsyncHealthService:
    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def service(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[ServiceEntry]]:
        endpoint = ListNodesForServiceRequest(service=service, features=features, **options)
        return await self._client.execute_typed(endpoint)

    async def node(
        self, node: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[HealthCheck]]:
        endpoint = ListNodeChecksRequest(node=node, features=features, **options)
        return await self._client.execute_typed(endpoint)

    async def checks(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[HealthCheck]]:
        endpoint = ListServiceChecksRequest(service=service, features=features, **options)
        return await self._client.execute_typed(endpoint)

    async def state(
        self,
        state: CheckState | str = CheckState.ANY,
        *,
        features: Features | None = None,
        **options: Any,
    ) -> ApiResponse[list[HealthCheck]]:
        endpoint = ListChecksInStateRequest(state=state, features=features, **options)
        return await self._client.execute_typed(endpoint)
