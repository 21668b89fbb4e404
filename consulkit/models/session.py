"""Session models."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from .base import ConsulModel


class SessionBehavior(str, Enum):
    RELEASE = "release"
    DELETE = "delete"


class ServiceCheck(ConsulModel):
    id: str | None = Field(None, alias="ID")
    namespace: str | None = None


class SessionEntry(ConsulModel):
    behavior: str | None = None
    create_index: int | None = None
    id: str | None = Field(None, alias="ID")
    # Nanoseconds on read
    lock_delay: int | None = None
    modify_index: int | None = None
    name: str | None = None
    namespace: str | None = None
    node: str | None = None
    node_checks: list[str] | None = None
    service_checks: list[ServiceCheck] | None = None
    ttl: str | None = Field(None, alias="TTL")


class CreateSessionResponse(ConsulModel):
    id: str = Field(alias="ID")
