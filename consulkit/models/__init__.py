"""
Consul data models.

All Pydantic models for request bodies and responses are available from this
module.
"""

from __future__ import annotations

# Base
from .base import ConsulModel

# Catalog
from .catalog import (
    CatalogService,
    CompoundServiceName,
    GatewayService,
    Node,
    NodeServices,
)

# Checks
from .check import (
    AgentCheck,
    AgentServiceCheck,
    HealthCheck,
    HealthCheckDefinition,
)

# Service mesh
from .connect import (
    ConnectProxy,
    ExposeConfig,
    ExposePath,
    MeshGatewayConfig,
    TransparentProxyConfig,
    Upstream,
)

# Health
from .health import CheckState, ServiceEntry

# Key/value
from .kv import KVPair, TypedKVPair

# Services
from .service import (
    AgentService,
    AgentServiceChecksInfo,
    AgentServiceConnect,
    AgentServiceRegistration,
    AgentServiceTaggedAddress,
    AgentWeights,
)

# Sessions
from .session import CreateSessionResponse, ServiceCheck, SessionBehavior, SessionEntry

__all__ = [
    # Base
    "ConsulModel",
    # Catalog
    "CatalogService",
    "CompoundServiceName",
    "GatewayService",
    "Node",
    "NodeServices",
    # Checks
    "AgentCheck",
    "AgentServiceCheck",
    "HealthCheck",
    "HealthCheckDefinition",
    # Service mesh
    "ConnectProxy",
    "ExposeConfig",
    "ExposePath",
    "MeshGatewayConfig",
    "TransparentProxyConfig",
    "Upstream",
    # Health
    "CheckState",
    "ServiceEntry",
    # Key/value
    "KVPair",
    "TypedKVPair",
    # Services
    "AgentService",
    "AgentServiceChecksInfo",
    "AgentServiceConnect",
    "AgentServiceRegistration",
    "AgentServiceTaggedAddress",
    "AgentWeights",
    # Sessions
    "CreateSessionResponse",
    "ServiceCheck",
    "SessionBehavior",
    "SessionEntry",
]
