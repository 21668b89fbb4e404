"""
consulkit: a typed Python client for the Consul HTTP API.

Example:
    ```python
    from consulkit import Consul

    with Consul() as client:
        for name, tags in client.catalog.services().response.items():
            print(name, tags)
    ```
"""

from __future__ import annotations

from ._version import __version__
from .api import (
    ApiResponse,
    Blocking,
    ConsistencyMode,
    Empty,
    Endpoint,
    Features,
    Raw,
    Route,
    Typed,
)
from .client import AsyncConsul, Consul
from .config import ClientSettings, resolve_settings
from .exceptions import (
    APIError,
    Base64DecodeError,
    ConfigurationError,
    ConsulError,
    DeserializationError,
    EmptyResponseError,
    EncodingError,
    FileReadError,
    ParseCertificateError,
    SerializationError,
    TransportBuildError,
    TransportError,
    Utf8DecodeError,
)
from .filters import F, Filter

__all__ = [
    "__version__",
    # Clients
    "Consul",
    "AsyncConsul",
    "ClientSettings",
    "resolve_settings",
    # Request/response
    "ApiResponse",
    "Blocking",
    "ConsistencyMode",
    "Features",
    "Endpoint",
    "Route",
    "Empty",
    "Raw",
    "Typed",
    "F",
    "Filter",
    # Errors
    "ConsulError",
    "APIError",
    "TransportError",
    "SerializationError",
    "DeserializationError",
    "EmptyResponseError",
    "EncodingError",
    "Base64DecodeError",
    "Utf8DecodeError",
    "ConfigurationError",
    "FileReadError",
    "ParseCertificateError",
    "TransportBuildError",
]
