"""
Endpoint abstraction.

An endpoint is a pydantic model describing one API operation. Its fields hold
the per-call values; a class-level ``Route`` holds the mapping table that says
how those fields become a request:

- fields named in the path template are substituted into the path
- fields listed in ``query`` become query parameters when not ``None``
- the field named by ``raw`` is sent verbatim as the request body
- every other field (except ``features``) is part of the JSON body

Example:
    class ReadKeyRequest(Endpoint):
        route: ClassVar[Route] = Route(
            "kv/{key}", query=("dc", "ns", "recurse"), response=Typed(list[KVPair])
        )

        key: str
        dc: str | None = None
        ns: str | None = None
        recurse: bool | None = None
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Literal, TypeAlias
from urllib.parse import quote

from pydantic import Field
from pydantic_core import PydanticSerializationError

from ..exceptions import SerializationError
from ..models.base import ConsulModel
from .features import Features

Method: TypeAlias = Literal["GET", "PUT", "DELETE"]

_PATH_FIELD = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True, slots=True)
class Empty:
    """The endpoint returns no payload; the body is ignored."""


@dataclass(frozen=True, slots=True)
class Raw:
    """The endpoint returns raw bytes."""


@dataclass(frozen=True, slots=True)
class Typed:
    """The endpoint returns JSON decoded into ``type_``."""

    type_: Any


ResponseShape: TypeAlias = Empty | Raw | Typed


@dataclass(frozen=True, slots=True)
class Route:
    path: str
    method: Method = "GET"
    query: tuple[str, ...] = ()
    raw: str | None = None
    response: ResponseShape = field(default_factory=Empty)

    @property
    def path_fields(self) -> tuple[str, ...]:
        return tuple(_PATH_FIELD.findall(self.path))


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class Endpoint(ConsulModel):
    """Base class for all endpoint definitions."""

    route: ClassVar[Route]
    _body_fields: ClassVar[tuple[str, ...]] = ()

    features: Features | None = Field(default=None, exclude=True)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        route = cls.__dict__.get("route")
        if route is None:
            return
        names = set(cls.model_fields)
        declared = [*route.path_fields, *route.query]
        if route.raw is not None:
            declared.append(route.raw)
        missing = [name for name in declared if name not in names]
        if missing:
            raise TypeError(f"{cls.__name__}.route references unknown fields: {missing}")
        skip = {"features", *declared}
        cls._body_fields = tuple(name for name in cls.model_fields if name not in skip)

    def resolve_path(self) -> str:
        """Substitute path fields into the route template (each value URL-quoted)."""

        def _sub(match: re.Match[str]) -> str:
            return quote(_query_value(getattr(self, match.group(1))), safe="/")

        return _PATH_FIELD.sub(_sub, self.route.path)

    def query_params(self) -> list[tuple[str, str]]:
        """Query parameters for fields that were given a value."""
        params: list[tuple[str, str]] = []
        for name in self.route.query:
            value = getattr(self, name)
            if value is None:
                continue
            params.append((name, _query_value(value)))
        return params

    def body_bytes(self) -> bytes | None:
        """
        Encode the request body.

        Raw endpoints send their bytes field untouched; endpoints without body
        fields send nothing.
        """
        if self.route.raw is not None:
            return bytes(getattr(self, self.route.raw))
        if not self._body_fields:
            return None
        try:
            text = self.model_dump_json(
                by_alias=True, exclude_none=True, include=set(self._body_fields)
            )
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationError(
                f"Failed to encode request body for {type(self).__name__}"
            ) from e
        return text.encode("utf-8")
