"""Health endpoints (``/health``)."""

from __future__ import annotations

from typing import ClassVar

from ..api.endpoint import Endpoint, Route, Typed
from ..models.check import HealthCheck
from ..models.health import CheckState, ServiceEntry


class ListNodesForServiceRequest(Endpoint):
    """
    Service instances with their node and checks.

    Filter expressions go through ``Features.filter``; ``passing`` narrows the
    result to instances whose checks are all passing.
    """

    route: ClassVar[Route] = Route(
        "health/service/{service}",
        query=("dc", "near", "ns", "passing", "peer", "tag"),
        response=Typed(list[ServiceEntry]),
    )

    service: str
    dc: str | None = None
    near: str | None = None
    ns: str | None = None
    passing: bool | None = None
    peer: str | None = None
    tag: str | None = None


class ListNodeChecksRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "health/node/{node}", query=("dc", "ns"), response=Typed(list[HealthCheck])
    )

    node: str
    dc: str | None = None
    ns: str | None = None


class ListServiceChecksRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "health/checks/{service}",
        query=("dc", "near", "ns"),
        response=Typed(list[HealthCheck]),
    )

    service: str
    dc: str | None = None
    near: str | None = None
    ns: str | None = None


class ListChecksInStateRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "health/state/{state}",
        query=("dc", "near", "ns"),
        response=Typed(list[HealthCheck]),
    )

    state: CheckState = CheckState.ANY
    dc: str | None = None
    near: str | None = None
    ns: str | None = None
