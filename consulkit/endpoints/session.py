"""Session endpoints (``/session``)."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from ..api.endpoint import Endpoint, Route, Typed
from ..models.session import CreateSessionResponse, ServiceCheck, SessionEntry


class CreateSessionRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "session/create",
        method="PUT",
        query=("dc",),
        response=Typed(CreateSessionResponse),
    )

    behavior: str | None = None
    dc: str | None = None
    # Duration string, e.g. "15s"
    lock_delay: str | None = None
    name: str | None = None
    namespace: str | None = None
    node: str | None = None
    node_checks: list[str] | None = None
    service_checks: list[ServiceCheck] | None = None
    ttl: str | None = Field(None, alias="TTL")


class DeleteSessionRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "session/destroy/{uuid}", method="PUT", query=("dc", "ns")
    )

    uuid: str
    dc: str | None = None
    ns: str | None = None


class ReadSessionRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "session/info/{uuid}", query=("dc", "ns"), response=Typed(list[SessionEntry])
    )

    uuid: str
    dc: str | None = None
    ns: str | None = None


class ListNodeSessionsRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "session/node/{node}", query=("dc", "ns"), response=Typed(list[SessionEntry])
    )

    node: str
    dc: str | None = None
    ns: str | None = None


class ListSessionsRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "session/list", query=("dc", "ns"), response=Typed(list[SessionEntry])
    )

    dc: str | None = None
    ns: str | None = None


class RenewSessionRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "session/renew/{uuid}",
        method="PUT",
        query=("dc", "ns"),
        response=Typed(list[SessionEntry]),
    )

    uuid: str
    dc: str | None = None
    ns: str | None = None
