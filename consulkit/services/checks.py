"""Agent check service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from ..api.features import Features
from ..api.response import ApiResponse
from ..endpoints.check import (
    DeregisterCheckRequest,
    ListChecksRequest,
    RegisterCheckRequest,
    TtlCheckFailRequest,
    TtlCheckPassRequest,
    TtlCheckUpdateRequest,
    TtlCheckWarnRequest,
)
from ..models.check import AgentCheck

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient

CheckStatus = Literal["passing", "warning", "critical"]


class CheckService:
    """Checks registered with the local agent, including TTL check updates."""

    def __init__(self, client: HTTPClient):
        self._client = client

    def register(self, name: str, **fields: Any) -> ApiResponse[None]:
        """
        Register a check.

        Keyword arguments map to ``RegisterCheckRequest`` fields, e.g.
        ``ttl="30s"`` or ``http="http://localhost:8080/health", interval="10s"``.
        """
        return self._client.execute_empty(RegisterCheckRequest(name=name, **fields))

    def deregister(self, check_id: str, *, ns: str | None = None) -> ApiResponse[None]:
        return self._client.execute_empty(DeregisterCheckRequest(check_id=check_id, ns=ns))

    def ttl_pass(self, check_id: str, *, note: str | None = None) -> ApiResponse[None]:
        return self._client.execute_empty(TtlCheckPassRequest(check_id=check_id, note=note))

    def ttl_warn(self, check_id: str, *, note: str | None = None) -> ApiResponse[None]:
        return self._client.execute_empty(TtlCheckWarnRequest(check_id=check_id, note=note))

    def ttl_fail(self, check_id: str, *, note: str | None = None) -> ApiResponse[None]:
        return self._client.execute_empty(TtlCheckFailRequest(check_id=check_id, note=note))

    def ttl_update(
        self, check_id: str, status: CheckStatus, *, output: str | None = None
    ) -> ApiResponse[None]:
        endpoint = TtlCheckUpdateRequest(check_id=check_id, status=status, output=output)
        return self._client.execute_empty(endpoint)

    def list(
        self, *, ns: str | None = None, features: Features | None = None
    ) -> ApiResponse[dict[str, AgentCheck]]:
        return self._client.execute_typed(ListChecksRequest(ns=ns, features=features))


class AsyncCheckService:
    """Async version of ``CheckService``."""

    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def register(self, name: str, **fields: Any) -> ApiResponse[None]:
        return await self._client.execute_empty(RegisterCheckRequest(name=name, **fields))

    async def deregister(self, check_id: str, *, ns: str | None = None) -> ApiResponse[None]:
        return await self._client.execute_empty(DeregisterCheckRequest(check_id=check_id, ns=ns))

    async def ttl_pass(self, check_id: str, *, note: str | None = None) -> ApiResponse[None]:
        return await self._client.execute_empty(TtlCheckPassRequest(check_id=check_id, note=note))

    async def ttl_warn(self, check_id: str, *, note: str | None = None) -> ApiResponse[None]:
        return await self._client.execute_empty(TtlCheckWarnRequest(check_id=check_id, note=note))

    async def ttl_fail(self, check_id: str, *, note: str | None = None) -> ApiResponse[None]:
        return await self._client.execute_empty(TtlCheckFailRequest(check_id=check_id, note=note))

    async def ttl_update(
        self, check_id: str, status: CheckStatus, *, output: str | None = None
    ) -> ApiResponse[None]:
        endpoint = TtlCheckUpdateRequest(check_id=check_id, status=status, output=output)
        return await self._client.execute_empty(endpoint)

    async def list(
        self, *, ns: str | None = None, features: Features | None = None
    ) -> ApiResponse[dict[str, AgentCheck]]:
        return await self._client.execute_typed(ListChecksRequest(ns=ns, features=features))
