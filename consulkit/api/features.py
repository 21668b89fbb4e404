"""
Optional request features.

Consul supports several cross-cutting request modifiers on its read endpoints:

- consistency modes (``?consistent`` / ``?stale``)
- blocking queries (``?index=<n>&wait=<duration>``)
- filtering (``?filter=<expression>``)
- agent caching (``?cached`` plus an optional ``Cache-Control`` header)

All features are optional and independent. No attempt is made to validate
combinations or whether an endpoint supports a feature; Consul rejects invalid
usage and the resulting ``APIError`` reaches the caller unchanged.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..filters import FilterExpression

if TYPE_CHECKING:
    from ..clients.pipeline import ConsulRequest
    from .response import ApiResponse

logger = logging.getLogger(__name__)

_MAX_INDEX = 2**64 - 1


class ConsistencyMode(str, Enum):
    """Read consistency mode; sent as a bare query flag."""

    CONSISTENT = "consistent"
    STALE = "stale"


class Blocking(BaseModel):
    """Blocking query settings."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, le=_MAX_INDEX)
    wait: str | None = None

    @classmethod
    def after(cls, response: ApiResponse[Any], *, wait: str | None = None) -> Blocking:
        """
        Build a blocking descriptor that waits for changes past ``response``.

        Raises ValueError if the response did not carry an ``X-Consul-Index``.
        """
        if response.index is None:
            raise ValueError("Response has no X-Consul-Index to block on")
        return cls(index=int(response.index), wait=wait)


class Features(BaseModel):
    """A set of features applied to a single request."""

    model_config = ConfigDict(frozen=True)

    blocking: Blocking | None = None
    cached: str | None = None
    filter: str | None = None
    mode: ConsistencyMode | None = None

    @field_validator("filter", mode="before")
    @classmethod
    def _render_filter(cls, value: Any) -> Any:
        if isinstance(value, FilterExpression):
            return value.to_string()
        return value


def apply_features(features: Features, request: ConsulRequest) -> None:
    """Add the query parameters and headers described by ``features`` to ``request``."""
    pairs: list[tuple[str, str]] = []
    keys: list[str] = []

    if features.blocking is not None:
        pairs.append(("index", str(features.blocking.index)))
        if features.blocking.wait is not None:
            pairs.append(("wait", features.blocking.wait))

    if features.cached is not None:
        if features.cached:
            request.set_header("Cache-Control", features.cached)
        keys.append("cached")

    if features.filter is not None:
        pairs.append(("filter", features.filter))

    if features.mode is not None:
        keys.append(features.mode.value)

    request.params.extend(pairs)
    request.params.extend((key, None) for key in keys)
    logger.info(f"Request features applied: {[name for name, _ in pairs] + keys}")
