"""
Key/value store service.

Besides the plain endpoint wrappers this module provides the JSON helpers
(``set_json``, ``read_json``, ``read_json_raw``) and session lock helpers
(``acquire``, ``release``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic_core import PydanticSerializationError, to_json

from ..api.features import Features
from ..api.response import ApiResponse
from ..clients.http import decode_typed
from ..endpoints.kv import (
    DeleteKeyRequest,
    ReadKeyRequest,
    ReadKeysRequest,
    ReadRawKeyRequest,
    SetKeyRequest,
)
from ..exceptions import EmptyResponseError, SerializationError
from ..models.kv import KVPair, TypedKVPair

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient, HTTPClient

T = TypeVar("T")


def _as_bytes(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def encode_json(value: Any) -> bytes:
    """Encode ``value`` (models dumped by alias) as JSON bytes."""
    try:
        return to_json(value, by_alias=True)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode {type(value).__name__} as JSON") from e


def _typed_pair(
    response: ApiResponse[list[KVPair]], type_: type[T]
) -> ApiResponse[TypedKVPair[T]]:
    if not response.response:
        raise EmptyResponseError("No key/value pair returned")
    pair = response.response[-1]
    raw = pair.decoded_value()
    if raw is None:
        raise EmptyResponseError(f"Key {pair.key!r} has no value")
    value = decode_typed(type_, raw, source=f"value of key {pair.key!r}")
    model = TypedKVPair[type_]  # type: ignore[valid-type]
    typed = model(**pair.model_dump(exclude={"value"}), value=value)
    return response.map(lambda _: typed)


def _decode_raw(response: ApiResponse[bytes], type_: type[T], key: str) -> ApiResponse[T]:
    return response.map(lambda raw: decode_typed(type_, raw, source=f"value of key {key!r}"))


class KVService:
    """Operations on the key/value store."""

    def __init__(self, client: HTTPClient):
        self._client = client

    def read(
        self,
        key: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        recurse: bool | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[KVPair]]:
        """
        Read a key (or, with ``recurse``, every key under a prefix).

        A missing key raises ``APIError`` with status 404.
        """
        endpoint = ReadKeyRequest(key=key, dc=dc, ns=ns, recurse=recurse, features=features)
        return self._client.execute_typed(endpoint)

    def read_raw(
        self,
        key: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[bytes]:
        """Read a key's value as stored, without the JSON/base64 wrapping."""
        endpoint = ReadRawKeyRequest(key=key, dc=dc, ns=ns, features=features)
        return self._client.execute_raw(endpoint)

    def keys(
        self,
        prefix: str = "",
        *,
        dc: str | None = None,
        ns: str | None = None,
        separator: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[str]]:
        endpoint = ReadKeysRequest(
            key=prefix, dc=dc, ns=ns, separator=separator, features=features
        )
        return self._client.execute_typed(endpoint)

    def set(
        self,
        key: str,
        value: bytes | str,
        *,
        acquire: str | None = None,
        cas: int | None = None,
        dc: str | None = None,
        flags: int | None = None,
        ns: str | None = None,
        release: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[bool]:
        """
        Write a value.

        Returns ``False`` in the payload when a ``cas``/``acquire`` condition
        was not met.
        """
        endpoint = SetKeyRequest(
            key=key,
            value=_as_bytes(value),
            acquire=acquire,
            cas=cas,
            dc=dc,
            flags=flags,
            ns=ns,
            release=release,
            features=features,
        )
        return self._client.execute_typed(endpoint)

    def delete(
        self,
        key: str,
        *,
        cas: int | None = None,
        dc: str | None = None,
        ns: str | None = None,
        recurse: bool | None = None,
        features: Features | None = None,
    ) -> ApiResponse[bool]:
        """
        Delete a key, or every key under it as a prefix when ``recurse`` is true.

        ``recurse=False`` sends nothing, since Consul only checks that the
        parameter is present.
        """
        endpoint = DeleteKeyRequest(
            key=key, cas=cas, dc=dc, ns=ns, recurse=recurse, features=features
        )
        return self._client.execute_typed(endpoint)

    def acquire(self, key: str, session: str, value: bytes | str = b"", **options: Any) -> bool:
        """Try to take the lock on ``key`` for ``session``; returns whether it was taken."""
        return self.set(key, value, acquire=session, **options).response

    def release(self, key: str, session: str, value: bytes | str = b"", **options: Any) -> bool:
        return self.set(key, value, release=session, **options).response

    def set_json(self, key: str, value: Any, **options: Any) -> ApiResponse[bool]:
        """Encode ``value`` as JSON and store it under ``key``."""
        return self.set(key, encode_json(value), **options)

    def read_json(self, key: str, type_: type[T], **options: Any) -> ApiResponse[TypedKVPair[T]]:
        """
        Read ``key`` and decode its value as JSON into ``type_``.

        Raises:
            EmptyResponseError: No entry was returned, or the entry has no value.
            Base64DecodeError: The transported value is not valid base64.
            DeserializationError: The value does not decode into ``type_``.
        """
        return _typed_pair(self.read(key, **options), type_)

    def read_json_raw(self, key: str, type_: type[T], **options: Any) -> ApiResponse[T]:
        """Like ``read_json`` but reads the raw value and returns only the decoded payload."""
        return _decode_raw(self.read_raw(key, **options), type_, key)


class AsyncKVService:
    """Async version of ``KVService``."""

    def __init__(self, client: AsyncHTTPClient):
        self._client = client

    async def read(
        self,
        key: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        recurse: bool | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[KVPair]]:
        endpoint = ReadKeyRequest(key=key, dc=dc, ns=ns, recurse=recurse, features=features)
        return await self._client.execute_typed(endpoint)

    async def read_raw(
        self,
        key: str,
        *,
        dc: str | None = None,
        ns: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[bytes]:
        endpoint = ReadRawKeyRequest(key=key, dc=dc, ns=ns, features=features)
        return await self._client.execute_raw(endpoint)

    async def keys(
        self,
        prefix: str = "",
        *,
        dc: str | None = None,
        ns: str | None = None,
        separator: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[list[str]]:
        endpoint = ReadKeysRequest(
            key=prefix, dc=dc, ns=ns, separator=separator, features=features
        )
        return await self._client.execute_typed(endpoint)

    async def set(
        self,
        key: str,
        value: bytes | str,
        *,
        acquire: str | None = None,
        cas: int | None = None,
        dc: str | None = None,
        flags: int | None = None,
        ns: str | None = None,
        release: str | None = None,
        features: Features | None = None,
    ) -> ApiResponse[bool]:
        endpoint = SetKeyRequest(
            key=key,
            value=_as_bytes(value),
            acquire=acquire,
            cas=cas,
            dc=dc,
            flags=flags,
            ns=ns,
            release=release,
            features=features,
        )
        return await self._client.execute_typed(endpoint)

    async def delete(
        self,
        key: str,
        *,
        cas: int | None = None,
        dc: str | None = None,
        ns: str | None = None,
        recurse: bool | None = None,
        features: Features | None = None,
    ) -> ApiResponse[bool]:
        endpoint = DeleteKeyRequest(
            key=key, cas=cas, dc=dc, ns=ns, recurse=recurse, features=features
        )
        return await self._client.execute_typed(endpoint)

    async def acquire(
        self, key: str, session: str, value: bytes | str = b"", **options: Any
    ) -> bool:
        return (await self.set(key, value, acquire=session, **options)).response

    async def release(
        self, key: str, session: str, value: bytes | str = b"", **options: Any
    ) -> bool:
        return (await self.set(key, value, release=session, **options)).response

    async def set_json(self, key: str, value: Any, **options: Any) -> ApiResponse[bool]:
        return await self.set(key, encode_json(value), **options)

    async def read_json(
        self, key: str, type_: type[T], **options: Any
    ) -> ApiResponse[TypedKVPair[T]]:
        return _typed_pair(await self.read(key, **options), type_)

    async def read_json_raw(self, key: str, type_: type[T], **options: Any) -> ApiResponse[T]:
        return _decode_raw(await self.read_raw(key, **options), type_, key)
