"""Snapshot service."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..api.response import ApiResponse
from ..endpoints.snapshot import GenerateSnapshotRequest, RestoreSnapshotRequest

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient


class SnapshotService:
    def __init__(self, client: HTTPClient):
        self._client = client

    def save(self, *, dc: str | None = None, stale: bool | None = None) -> ApiResponse[bytes]:
        """Download a snapshot archive; the bytes are returned unmodified."""
        return self._client.execute_raw(GenerateSnapshotRequest(dc=dc, stale=stale))

    def restore(self, data: bytes, *, dc: str | None = None) -> ApiResponse[None]:
        return self._client.execute_empty(RestoreSnapshotRequest(data=data, dc=dc))


class AsyncSnapshotService:
    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def save(
        self, *, dc: str | None = None, stale: bool | None = None
    ) -> ApiResponse[bytes]:
        return await self._client.execute_raw(GenerateSnapshotRequest(dc=dc, stale=stale))

    async def restore(self, data: bytes, *, dc: str | None = None) -> ApiResponse[None]:
        return await self._client.execute_empty(RestoreSnapshotRequest(data=data, dc=dc))
