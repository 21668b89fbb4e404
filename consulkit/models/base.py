"""Shared pydantic base for Consul wire models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class ConsulModel(BaseModel):
    """
    Base model for Consul payloads.

    Consul uses PascalCase keys on the wire; fields are declared in snake_case
    and aliased automatically. Acronym keys (``ID``, ``CheckID``, ``TTL``, ...)
    carry an explicit ``Field(alias=...)``. Unknown keys are ignored so newer
    servers do not break older clients.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )
