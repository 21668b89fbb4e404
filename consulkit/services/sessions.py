"""Session service."""

from __future__ import annotations

import builtins
from typing import TYPE_CHECKING, Any

from ..api.features import Features
from ..api.response import ApiResponse
from ..endpoints.session import (
    CreateSessionRequest,
    DeleteSessionRequest,
    ListNodeSessionsRequest,
    ListSessionsRequest,
    ReadSessionRequest,
    RenewSessionRequest,
)
from ..models.session import CreateSessionResponse, SessionEntry

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient


class SessionService:
    """
    Sessions, used for distributed locks and leader election.

    Example:
        ```python
        session = client.sessions.create(name="leader", ttl="15s").response.id
        if client.kv.acquire("service/leader", session, "node-a"):
            ...
        client.kv.release("service/leader", session)
        client.sessions.destroy(session)
        ```
    """

    def __init__(self, client: HTTPClient):
        self._client = client

    def create(self, **fields: Any) -> ApiResponse[CreateSessionResponse]:
        """Create a session (fields: ``name``, ``ttl``, ``behavior``, ``lock_delay``, ...)."""
        return self._client.execute_typed(CreateSessionRequest(**fields))

    def destroy(
        self, uuid: str, *, dc: str | None = None, ns: str | None = None
    ) -> ApiResponse[None]:
        return self._client.execute_empty(DeleteSessionRequest(uuid=uuid, dc=dc, ns=ns))

    def info(
        self,
        uuid: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        endpoint = ReadSessionRequest(uuid=uuid, dc=dc, ns=ns, features=features)
        return self._client.execute_typed(endpoint)

    def node(
        self,
        node: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        endpoint = ListNodeSessionsRequest(node=node, dc=dc, ns=ns, features=features)
        return self._client.execute_typed(endpoint)

    def list(
        self,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        return self._client.execute_typed(ListSessionsRequest(dc=dc, ns=ns, features=features))

    def renew(
        self, uuid: str, *, dc: str | None = None, ns: str | None = None
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        return self._client.execute_typed(RenewSessionRequest(uuid=uuid, dc=dc, ns=ns))


class AsyncSessionService:
    """Async version of ``SessionService``."""

    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def create(self, **fields: Any) -> ApiResponse[CreateSessionResponse]:
        return await self._client.execute_typed(CreateSessionRequest(**fields))

    async def destroy(
        self, uuid: str, *, dc: str | None = None, ns: str | None = None
    ) -> ApiResponse[None]:
        return await self._client.execute_empty(DeleteSessionRequest(uuid=uuid, dc=dc, ns=ns))

    async def info(
        self,
        uuid: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        endpoint = ReadSessionRequest(uuid=uuid, dc=dc, ns=ns, features=features)
        return await self._client.execute_typed(endpoint)

    async def node(
        self,
        node: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        endpoint = ListNodeSessionsRequest(node=node, dc=dc, ns=ns, features=features)
        return await self._client.execute_typed(endpoint)

    async def list(
        self,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        return await self._client.execute_typed(
            ListSessionsRequest(dc=dc, ns=ns, features=features)
        )

    async def renew(
        self, uuid: str, *, dc: str | None = None, ns: str | None = None
    ) -> ApiResponse[builtins.list[SessionEntry]]:
        return await self._client.execute_typed(RenewSessionRequest(uuid=uuid, dc=dc, ns=ns))
