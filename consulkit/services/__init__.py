"""Per-area service classes (sync and async) built on the HTTP executors."""

from __future__ import annotations

from .catalog import AsyncCatalogService, CatalogService
from .checks import AsyncCheckService, CheckService
from .health import AsyncHealthService, HealthService
from .kv import AsyncKVService, KVService
from .services import AgentServiceService, AsyncAgentServiceService
from .sessions import AsyncSessionService, SessionService
from .snapshot import AsyncSnapshotService, SnapshotService

__all__ = [
    "AgentServiceService",
    "AsyncAgentServiceService",
    "AsyncCatalogService",
    "AsyncCheckService",
    "AsyncHealthService",
    "AsyncKVService",
    "AsyncSessionService",
    "AsyncSnapshotService",
    "CatalogService",
    "CheckService",
    "HealthService",
    "KVService",
    "SessionService",
    "SnapshotService",
]
