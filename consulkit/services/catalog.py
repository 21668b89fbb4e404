"""Catalog service: nodes, services and datacenters known to the cluster."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..api.features import Features
from ..api.response import ApiResponse
from ..endpoints.catalog import (
    DeregisterEntityRequest,
    ListDatacentersRequest,
    ListGatewayServicesRequest,
    ListNodeServicesRequest,
    ListNodesForConnectServiceRequest,
    ListNodesForServiceRequest,
    ListNodesRequest,
    ListServicesRequest,
    RegisterEntityRequest,
)
from ..models.catalog import CatalogService as CatalogServiceEntry
from ..models.catalog import GatewayService, Node, NodeServices

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient


class CatalogService:
    """
    Catalog operations.

    Registration here writes directly to the catalog; services registered this
    way are not managed by any agent. Prefer ``client.services.register`` for
    agent-managed services.
    """

    def __init__(self, client: HTTPClient):
        self._client = client

    def register(self, node: str, address: str, **fields: Any) -> ApiResponse[bool]:
        """Register a node (and optionally a ``service`` and ``checks``) in the catalog."""
        return self._client.execute_typed(
            RegisterEntityRequest(node=node, address=address, **fields)
        )

    def deregister(self, node: str, **fields: Any) -> ApiResponse[bool]:
        """Remove a node, or only one service or check on it (``service_id``, ``check_id``)."""
        return self._client.execute_typed(DeregisterEntityRequest(node=node, **fields))

    def datacenters(self, *, features: Features | None = None) -> ApiResponse[list[str]]:
        return self._client.execute_typed(ListDatacentersRequest(features=features))

    def nodes(
        self,
        *,
        dc: str | None = None,
        near: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[Node]]:
        return self._client.execute_typed(ListNodesRequest(dc=dc, near=near, features=features))

    def services(
        self,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[dict[str, list[str]]]:
        """Service names mapped to their tags."""
        return self._client.execute_typed(ListServicesRequest(dc=dc, ns=ns, features=features))

    def service(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[CatalogServiceEntry]]:
        """Nodes providing ``service`` (options: ``dc``, ``near``, ``ns``, ``tag``)."""
        endpoint = ListNodesForServiceRequest(service=service, features=features, **options)
        return self._client.execute_typed(endpoint)

    def connect(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[CatalogServiceEntry]]:
        """Connect-capable instances (proxies or native) of ``service``."""
        endpoint = ListNodesForConnectServiceRequest(
            service=service, features=features, **options
        )
        return self._client.execute_typed(endpoint)

    def node_services(
        self,
        node: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[NodeServices]:
        endpoint = ListNodeServicesRequest(node=node, dc=dc, ns=ns, features=features)
        return self._client.execute_typed(endpoint)

    def gateway_services(
        self,
        gateway: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[GatewayService] | None]:
        endpoint = ListGatewayServicesRequest(gateway=gateway, dc=dc, ns=ns, features=features)
        return self._client.execute_typed(endpoint)


class AsyncCatalogService:
    """Async version of ``CatalogService``."""

    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def register(self, node: str, address: str, **fields: Any) -> ApiResponse[bool]:
        return await self._client.execute_typed(
            RegisterEntityRequest(node=node, address=address, **fields)
        )

    async def deregister(self, node: str, **fields: Any) -> ApiResponse[bool]:
        return await self._client.execute_typed(DeregisterEntityRequest(node=node, **fields))

    async def datacenters(self, *, features: Features | None = None) -> ApiResponse[list[str]]:
        return await self._client.execute_typed(ListDatacentersRequest(features=features))

    async def nodes(
        self,
        *,
        dc: str | None = None,
        near: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[Node]]:
        return await self._client.execute_typed(
            ListNodesRequest(dc=dc, near=near, features=features)
        )

    async def services(
        self,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[dict[str, list[str]]]:
        return await self._client.execute_typed(
            ListServicesRequest(dc=dc, ns=ns, features=features)
        )

    async def service(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[CatalogServiceEntry]]:
        endpoint = ListNodesForServiceRequest(service=service, features=features, **options)
        return await self._client.execute_typed(endpoint)

    async def connect(
        self, service: str, *, features: Features | None = None, **options: Any
    ) -> ApiResponse[list[CatalogServiceEntry]]:
        endpoint = ListNodesForConnectServiceRequest(
            service=service, features=features, **options
        )
        return await self._client.execute_typed(endpoint)

    async def node_services(
        self,
        node: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[NodeServices]:
        endpoint = ListNodeServicesRequest(node=node, dc=dc, ns=ns, features=features)
        return await self._client.execute_typed(endpoint)

    async def gateway_services(
        self,
        gateway: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[GatewayService] | None]:
        endpoint = ListGatewayServicesRequest(gateway=gateway, dc=dc, ns=ns, features=features)
        return await self._client.execute_typed(endpoint)
