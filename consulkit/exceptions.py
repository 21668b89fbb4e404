"""
Exceptions raised by the Consul client.

Every failure surfaced by request execution is one of the classes below; the
underlying cause (httpx, pydantic, binascii, ...) is always chained via
``__cause__``. Configuration errors are only raised while building a client.
"""

from __future__ import annotations

from os import PathLike


class ConsulError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Execution errors
# =============================================================================


class APIError(ConsulError):
    """
    The Consul server answered with a non-2xx status.

    ``message`` holds the response body (Consul reports errors as plain text),
    or ``None`` when the body was empty.
    """

    def __init__(self, status_code: int, message: str | None = None) -> None:
        text = f"The Consul server returned an error (status code {status_code})"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
        self.status_code = status_code
        self.api_message = message

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


class TransportError(ConsulError):
    """The request could not be built or sent, or no response was obtained."""


class SerializationError(ConsulError):
    """A caller-supplied value could not be encoded to JSON."""


class DeserializationError(ConsulError):
    """A response body did not match the declared response type."""


class EmptyResponseError(ConsulError):
    """A typed response was expected but the server returned nothing usable."""

    def __init__(self, message: str = "Empty response") -> None:
        super().__init__(message)


class EncodingError(ConsulError):
    """Binary-to-text decoding of a value failed."""


class Base64DecodeError(EncodingError):
    """A value transported as base64 could not be decoded."""


class Utf8DecodeError(EncodingError):
    """Decoded bytes were not valid UTF-8."""


# =============================================================================
# Construction errors
# =============================================================================


class ConfigurationError(ConsulError):
    """The client could not be constructed from its settings."""


class FileReadError(ConfigurationError):
    """A certificate, key or token file could not be read."""

    def __init__(self, path: str | PathLike[str], reason: str | None = None) -> None:
        message = f"Error reading file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class ParseCertificateError(ConfigurationError):
    """A PEM certificate or key could not be parsed."""

    def __init__(self, path: str | PathLike[str], reason: str | None = None) -> None:
        message = f"Error parsing certificate as PEM: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class TransportBuildError(ConfigurationError):
    """The underlying HTTP client could not be configured."""
