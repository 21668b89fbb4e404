from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel


def to_cli(value: Any) -> Any:
    """Convert payloads (models, lists, maps of models) into JSON-safe data keyed by wire names."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {str(k): to_cli(v) for k, v in value.items()}
    if isinstance(value, (str, bytes)):
        return value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value
    if isinstance(value, Iterable):
        return [to_cli(v) for v in value]
    return value

