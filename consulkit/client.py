"""
Main Consul API client.

Provides a unified interface to all supported Consul API areas.
"""

from __future__ import annotations

from typing import Any

from .api.endpoint import Endpoint
from .api.response import ApiResponse
from .clients.http import AsyncHTTPClient, HTTPClient
from .config import ClientSettings, resolve_settings
from .services.catalog import AsyncCatalogService, CatalogService
from .services.checks import AsyncCheckService, CheckService
from .services.health import AsyncHealthService, HealthService
from .services.kv import AsyncKVService, KVService
from .services.services import AgentServiceService, AsyncAgentServiceService
from .services.sessions import AsyncSessionService, SessionService
from .services.snapshot import AsyncSnapshotService, SnapshotService


class Consul:
    """
    Synchronous Consul API client.

    Settings not given explicitly are read once from the standard ``CONSUL_*``
    environment variables (see ``consulkit.config``).

    Example:
        ```python
        from consulkit import Consul, Features, Blocking

        with Consul(address="http://127.0.0.1:8500") as client:
            client.kv.set_json("app/config", {"replicas": 3})
            entry = client.kv.read_json("app/config", dict)
            print(entry.response.value, entry.index)

            # Wait for the next change
            changed = client.kv.read(
                "app/config",
                features=Features(blocking=Blocking.after(entry, wait="30s")),
            )
        ```

    Attributes:
        kv: Key/value store operations
        catalog: Catalog registration and queries
        checks: Local agent check operations
        health: Health queries
        services: Local agent service operations
        sessions: Session operations
        snapshot: Snapshot save/restore
    """

    def __init__(
        self,
        *,
        address: str | None = None,
        token: str | None = None,
        settings: ClientSettings | None = None,
        **options: Any,
    ):
        """
        Initialize the client.

        Args:
            address: Consul HTTP address (default: ``$CONSUL_HTTP_ADDR`` or
                http://127.0.0.1:8500)
            token: ACL token (default: ``$CONSUL_HTTP_TOKEN``)
            settings: Pre-resolved settings; when given, no other option may be passed
            **options: Any other ``resolve_settings`` argument (``verify``,
                ``ca_cert``, ``timeout``, ``transport``, ``env``, ...)
        """
        if settings is None:
            settings = resolve_settings(address=address, token=token, **options)
        elif address is not None or token is not None or options:
            raise TypeError("Pass either settings or individual options, not both")
        self._http = HTTPClient(settings)

        self._kv: KVService | None = None
        self._catalog: CatalogService | None = None
        self._checks: CheckService | None = None
        self._health: HealthService | None = None
        self._services: AgentServiceService | None = None
        self._sessions: SessionService | None = None
        self._snapshot: SnapshotService | None = None

    def __enter__(self) -> Consul:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._http.close()

    @property
    def settings(self) -> ClientSettings:
        return self._http.settings

    # =========================================================================
    # Service Properties (lazy initialization)
    # =========================================================================

    @property
    def kv(self) -> KVService:
        """Key/value store operations."""
        if self._kv is None:
            self._kv = KVService(self._http)
        return self._kv

    @property
    def catalog(self) -> CatalogService:
        """Catalog registration and queries."""
        if self._catalog is None:
            self._catalog = CatalogService(self._http)
        return self._catalog

    @property
    def checks(self) -> CheckService:
        """Local agent check operations."""
        if self._checks is None:
            self._checks = CheckService(self._http)
        return self._checks

    @property
    def health(self) -> HealthService:
        """Health queries."""
        if self._health is None:
            self._health = HealthService(self._http)
        return self._health

    @property
    def services(self) -> AgentServiceService:
        """Local agent service operations."""
        if self._services is None:
            self._services = AgentServiceService(self._http)
        return self._services

    @property
    def sessions(self) -> SessionService:
        """Session operations."""
        if self._sessions is None:
            self._sessions = SessionService(self._http)
        return self._sessions

    @property
    def snapshot(self) -> SnapshotService:
        """Snapshot save/restore."""
        if self._snapshot is None:
            self._snapshot = SnapshotService(self._http)
        return self._snapshot

    # =========================================================================
    # Direct endpoint execution
    # =========================================================================

    def execute(self, endpoint: Endpoint) -> ApiResponse[Any]:
        """Execute any endpoint definition according to its response shape."""
        return self._http.execute(endpoint)

    def execute_empty(self, endpoint: Endpoint) -> ApiResponse[None]:
        return self._http.execute_empty(endpoint)

    def execute_raw(self, endpoint: Endpoint) -> ApiResponse[bytes]:
        return self._http.execute_raw(endpoint)

    def execute_typed(self, endpoint: Endpoint) -> ApiResponse[Any]:
        return self._http.execute_typed(endpoint)


# =============================================================================
# Async Client (same interface, async methods)
# =============================================================================


class AsyncConsul:
    """
    Asynchronous Consul API client.

    Same interface as ``Consul`` but with async/await support.

    Example:
        ```python
        async with AsyncConsul() as client:
            services = await client.catalog.services()
            print(services.response)
        ```
    """

    def __init__(
        self,
        *,
        address: str | None = None,
        token: str | None = None,
        settings: ClientSettings | None = None,
        **options: Any,
    ):
        if settings is None:
            settings = resolve_settings(address=address, token=token, **options)
        elif address is not None or token is not None or options:
            raise TypeError("Pass either settings or individual options, not both")
        self._http = AsyncHTTPClient(settings)

        self._kv: AsyncKVService | None = None
        self._catalog: AsyncCatalogService | None = None
        self._checks: AsyncCheckService | None = None
        self._health: AsyncHealthService | None = None
        self._services: AsyncAgentServiceService | None = None
        self._sessions: AsyncSessionService | None = None
        self._snapshot: AsyncSnapshotService | None = None

    @property
    def settings(self) -> ClientSettings:
        return self._http.settings

    @property
    def kv(self) -> AsyncKVService:
        if self._kv is None:
            self._kv = AsyncKVService(self._http)
        return self._kv

    @property
    def catalog(self) -> AsyncCatalogService:
        if self._catalog is None:
            self._catalog = AsyncCatalogService(self._http)
        return self._catalog

    @property
    def checks(self) -> AsyncCheckService:
        if self._checks is None:
            self._checks = AsyncCheckService(self._http)
        return self._checks

    @property
    def health(self) -> AsyncHealthService:
        if self._health is None:
            self._health = AsyncHealthService(self._http)
        return self._health

    @property
    def services(self) -> AsyncAgentServiceService:
        if self._services is None:
            self._services = AsyncAgentServiceService(self._http)
        return self._services

    @property
    def sessions(self) -> AsyncSessionService:
        if self._sessions is None:
            self._sessions = AsyncSessionService(self._http)
        return self._sessions

    @property
    def snapshot(self) -> AsyncSnapshotService:
        if self._snapshot is None:
            self._snapshot = AsyncSnapshotService(self._http)
        return self._snapshot

    async def execute(self, endpoint: Endpoint) -> ApiResponse[Any]:
        return await self._http.execute(endpoint)

    async def execute_empty(self, endpoint: Endpoint) -> ApiResponse[None]:
        return await self._http.execute_empty(endpoint)

    async def execute_raw(self, endpoint: Endpoint) -> ApiResponse[bytes]:
        return await self._http.execute_raw(endpoint)

    async def execute_typed(self, endpoint: Endpoint) -> ApiResponse[Any]:
        return await self._http.execute_typed(endpoint)

    async def __aenter__(self) -> AsyncConsul:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http.close()
