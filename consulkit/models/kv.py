"""Key/value store models."""

from __future__ import annotations

import base64
import binascii
from typing import Generic, TypeVar

from ..exceptions import Base64DecodeError, Utf8DecodeError
from .base import ConsulModel

T = TypeVar("T")


class KVPair(ConsulModel):
    """
    A single entry as returned by ``GET /kv/{key}``.

    ``value`` is the base64 text Consul sends; use ``decoded_value()`` or
    ``text_value()`` to get at the stored bytes.
    """

    create_index: int = 0
    flags: int = 0
    key: str = ""
    lock_index: int = 0
    modify_index: int = 0
    namespace: str | None = None
    session: str | None = None
    value: str | None = None

    def decoded_value(self) -> bytes | None:
        if self.value is None:
            return None
        try:
            return base64.b64decode(self.value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise Base64DecodeError(f"Value of key {self.key!r} is not valid base64") from e

    def text_value(self) -> str | None:
        raw = self.decoded_value()
        if raw is None:
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise Utf8DecodeError(f"Value of key {self.key!r} is not valid UTF-8") from e


class TypedKVPair(ConsulModel, Generic[T]):
    """A ``KVPair`` whose value has been decoded into a caller-chosen type."""

    create_index: int = 0
    flags: int = 0
    key: str = ""
    lock_index: int = 0
    modify_index: int = 0
    namespace: str | None = None
    session: str | None = None
    value: T
