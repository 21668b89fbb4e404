"""Snapshot endpoints (``/snapshot``)."""

from __future__ import annotations

from typing import ClassVar

from ..api.endpoint import Endpoint, Raw, Route


class GenerateSnapshotRequest(Endpoint):
    """Download a gzipped tar archive of the server state."""

    route: ClassVar[Route] = Route("snapshot", query=("dc", "stale"), response=Raw())

    dc: str | None = None
    stale: bool | None = None


class RestoreSnapshotRequest(Endpoint):
    route: ClassVar[Route] = Route("snapshot", method="PUT", query=("dc",), raw="data")

    data: bytes
    dc: str | None = None
