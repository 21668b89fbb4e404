"""Key/value store endpoints (``/kv``)."""

from __future__ import annotations

from typing import Annotated, ClassVar

from pydantic import AfterValidator

from ..api.endpoint import Endpoint, Raw, Route, Typed
from ..models.kv import KVPair

# Consul recurses whenever the key is present, so False is dropped like None.
PresenceFlag = Annotated[bool | None, AfterValidator(lambda v: v or None)]


class ReadKeyRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "kv/{key}", query=("dc", "ns", "recurse"), response=Typed(list[KVPair])
    )

    key: str
    dc: str | None = None
    ns: str | None = None
    recurse: PresenceFlag = None


class ReadRawKeyRequest(Endpoint):
    route: ClassVar[Route] = Route("kv/{key}", query=("dc", "ns", "raw"), response=Raw())

    key: str
    dc: str | None = None
    ns: str | None = None
    raw: bool = True


class ReadKeysRequest(Endpoint):
    """List key names under a prefix (``?keys``)."""

    route: ClassVar[Route] = Route(
        "kv/{key}",
        query=("dc", "keys", "ns", "recurse", "separator"),
        response=Typed(list[str]),
    )

    key: str = ""
    dc: str | None = None
    keys: bool = True
    ns: str | None = None
    recurse: PresenceFlag = None
    separator: str | None = None


class SetKeyRequest(Endpoint):
    """Write ``value`` verbatim; ``cas``/``acquire``/``release`` make it conditional."""

    route: ClassVar[Route] = Route(
        "kv/{key}",
        method="PUT",
        query=("acquire", "cas", "dc", "flags", "ns", "release"),
        raw="value",
        response=Typed(bool),
    )

    key: str
    value: bytes = b""
    acquire: str | None = None
    cas: int | None = None
    dc: str | None = None
    flags: int | None = None
    ns: str | None = None
    release: str | None = None


class DeleteKeyRequest(Endpoint):
    route: ClassVar[Route] = Route(
        "kv/{key}",
        method="DELETE",
        query=("cas", "dc", "ns", "recurse"),
        response=Typed(bool),
    )

    key: str
    cas: int | None = None
    dc: str | None = None
    ns: str | None = None
    recurse: PresenceFlag = None
