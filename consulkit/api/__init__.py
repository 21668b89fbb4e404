"""Endpoint abstraction, request features, middleware and the response envelope."""

from __future__ import annotations

from .endpoint import Empty, Endpoint, Raw, ResponseShape, Route, Typed
from .features import Blocking, ConsistencyMode, Features, apply_features
from .middleware import EndpointMiddleware, MiddlewareContext
from .response import ApiResponse, parse_headers

__all__ = [
    "ApiResponse",
    "Blocking",
    "ConsistencyMode",
    "Empty",
    "Endpoint",
    "EndpointMiddleware",
    "Features",
    "MiddlewareContext",
    "Raw",
    "ResponseShape",
    "Route",
    "Typed",
    "apply_features",
    "parse_headers",
]
