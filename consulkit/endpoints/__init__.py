"""
Endpoint definitions, one module per API area.

Names repeat across areas (``catalog.ListServicesRequest`` and
``service.ListServicesRequest`` are different endpoints), so import from the
area module.
"""

from __future__ import annotations

from . import catalog, check, health, kv, service, session, snapshot

__all__ = ["catalog", "check", "health", "kv", "service", "session", "snapshot"]
