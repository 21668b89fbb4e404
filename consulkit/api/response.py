"""
Response envelope.

Every successful execution returns an ``ApiResponse`` wrapping the payload
together with the metadata Consul reports in response headers.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# Envelope attribute -> response header. Names must match exactly.
METADATA_HEADERS: dict[str, str] = {
    "cache": "X-Cache",
    "content_hash": "X-Consul-ContentHash",
    "default_acl_policy": "X-Consul-Default-ACL-Policy",
    "index": "X-Consul-Index",
    "known_leader": "X-Consul-KnownLeader",
    "last_contact": "X-Consul-LastContact",
    "query_backend": "X-Consul-Query-Backend",
}


@dataclass(frozen=True, slots=True)
class ApiResponse(Generic[T]):
    """
    Payload plus response metadata.

    Metadata fields are ``None`` unless the matching header was present.
    ``index`` is kept as the raw header string; use ``Blocking.after(response)``
    to chain a blocking query from it.
    """

    response: T
    cache: str | None = None
    content_hash: str | None = None
    default_acl_policy: str | None = None
    index: str | None = None
    known_leader: str | None = None
    last_contact: str | None = None
    query_backend: str | None = None

    def metadata(self) -> dict[str, str]:
        """Return the metadata fields that were set."""
        out: dict[str, str] = {}
        for f in fields(self):
            if f.name == "response":
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        return out

    def map(self, fn: Callable[[T], U]) -> ApiResponse[U]:
        """Return a copy with ``fn`` applied to the payload; metadata is kept."""
        return replace(self, response=fn(self.response))  # type: ignore[return-value]


def parse_headers(header: Callable[[str], str | None]) -> dict[str, str]:
    """Extract envelope metadata using a case-insensitive header lookup."""
    found: dict[str, str] = {}
    for attr, name in METADATA_HEADERS.items():
        value = header(name)
        if value is not None:
            found[attr] = value
    return found


def build_envelope(payload: Any, metadata: dict[str, str]) -> ApiResponse[Any]:
    return ApiResponse(response=payload, **metadata)
