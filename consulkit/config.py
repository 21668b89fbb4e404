"""
Client configuration.

Settings are resolved once, when a client is built. Explicit arguments win;
anything left unset falls back to the standard Consul environment variables:

    CONSUL_HTTP_ADDR        address (default http://127.0.0.1:8500)
    CONSUL_HTTP_SSL         "true" adds https:// to a scheme-less address
    CONSUL_HTTP_TOKEN       ACL token
    CONSUL_HTTP_TOKEN_FILE  file holding the ACL token (when no token is set)
    CONSUL_CACERT           CA certificate file
    CONSUL_CAPATH           directory of CA certificate files
    CONSUL_CLIENT_CERT      client certificate (PEM)
    CONSUL_CLIENT_KEY       client private key (PEM)
    CONSUL_HTTP_SSL_VERIFY  "false" disables TLS verification

The environment is read through a mapping passed as ``env`` (``os.environ`` by
default), so tests can resolve settings without touching the process
environment.
"""

from __future__ import annotations

import logging
import os
import ssl
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import FileReadError, ParseCertificateError

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "http://127.0.0.1:8500"
DEFAULT_API_VERSION = 1


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """
    Resolved client settings.

    ``timeout`` defaults to ``None`` (no client-side limit): blocking queries
    are bounded by the server's ``wait`` and must not be cut short.
    """

    address: str = DEFAULT_ADDRESS
    ca_certs: tuple[Path, ...] = ()
    client_cert: Path | None = None
    client_key: Path | None = None
    token: str | None = field(default=None, repr=False)
    verify: bool = True
    version: int = DEFAULT_API_VERSION
    timeout: float | None = None
    log_requests: bool = False
    # Test/advanced hooks: custom httpx transports
    transport: httpx.BaseTransport | None = field(default=None, repr=False, compare=False)
    async_transport: httpx.AsyncBaseTransport | None = field(
        default=None, repr=False, compare=False
    )


def load_env_file(path: str | os.PathLike[str]) -> dict[str, str]:
    """Read a ``.env`` file into a mapping (requires python-dotenv)."""
    from dotenv import dotenv_values

    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def _lookup(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _truthy(value: str | None) -> bool:
    return value is not None and value.lower() in ("1", "true", "yes")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, str(e)) from e


def _ca_path_files(directory: Path) -> list[Path]:
    try:
        return sorted(p for p in directory.iterdir() if p.is_file())
    except OSError as e:
        raise FileReadError(directory, str(e)) from e


def resolve_settings(
    *,
    address: str | None = None,
    token: str | None = None,
    token_file: str | os.PathLike[str] | None = None,
    ca_cert: str | os.PathLike[str] | None = None,
    ca_path: str | os.PathLike[str] | None = None,
    client_cert: str | os.PathLike[str] | None = None,
    client_key: str | os.PathLike[str] | None = None,
    verify: bool | None = None,
    version: int = DEFAULT_API_VERSION,
    timeout: float | None = None,
    log_requests: bool = False,
    transport: httpx.BaseTransport | None = None,
    async_transport: httpx.AsyncBaseTransport | None = None,
    env: Mapping[str, str] | None = None,
    dotenv_path: str | os.PathLike[str] | None = None,
) -> ClientSettings:
    """
    Resolve client settings from explicit values and the environment.

    Args:
        env: Environment mapping to read from (defaults to ``os.environ``).
        dotenv_path: Optional ``.env`` file; its values sit underneath ``env``
            so real environment variables still win.

    Raises:
        FileReadError: A token file or CA directory could not be read.
    """
    lookup: dict[str, str] = {}
    if dotenv_path is not None:
        lookup.update(load_env_file(dotenv_path))
        logger.debug(f"Loaded environment defaults from {dotenv_path}")
    lookup.update(os.environ if env is None else env)

    resolved_address = address or _lookup(lookup, "CONSUL_HTTP_ADDR") or DEFAULT_ADDRESS
    if "://" not in resolved_address:
        scheme = "https" if _truthy(_lookup(lookup, "CONSUL_HTTP_SSL")) else "http"
        resolved_address = f"{scheme}://{resolved_address}"
    resolved_address = resolved_address.rstrip("/")
    logger.debug(f"Using Consul address {resolved_address}")

    resolved_token = token if token is not None else _lookup(lookup, "CONSUL_HTTP_TOKEN")
    if resolved_token is None:
        token_path = token_file or _lookup(lookup, "CONSUL_HTTP_TOKEN_FILE")
        if token_path is not None:
            resolved_token = _read_text(Path(token_path)).strip() or None
            logger.debug("Using ACL token from token file")

    ca_certs: list[Path] = []
    ca_file = ca_cert or _lookup(lookup, "CONSUL_CACERT")
    if ca_file is not None:
        ca_certs.append(Path(ca_file))
    ca_dir = ca_path or _lookup(lookup, "CONSUL_CAPATH")
    if ca_dir is not None:
        ca_certs.extend(_ca_path_files(Path(ca_dir)))

    cert = client_cert or _lookup(lookup, "CONSUL_CLIENT_CERT")
    key = client_key or _lookup(lookup, "CONSUL_CLIENT_KEY")

    if verify is None:
        verify = _lookup(lookup, "CONSUL_HTTP_SSL_VERIFY") != "false"

    return ClientSettings(
        address=resolved_address,
        ca_certs=tuple(ca_certs),
        client_cert=Path(cert) if cert is not None else None,
        client_key=Path(key) if key is not None else None,
        token=resolved_token,
        verify=verify,
        version=version,
        timeout=timeout,
        log_requests=log_requests,
        transport=transport,
        async_transport=async_transport,
    )


def build_ssl_context(settings: ClientSettings) -> ssl.SSLContext:
    """
    Build the TLS context used by the HTTP transport.

    Raises:
        FileReadError: A certificate or key file could not be read.
        ParseCertificateError: A file was read but is not a usable PEM.
    """
    context = ssl.create_default_context()
    if not settings.verify:
        logger.warning("TLS certificate verification is disabled")
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    for path in settings.ca_certs:
        pem = _read_text(path)
        try:
            context.load_verify_locations(cadata=pem)
        except (ssl.SSLError, ValueError) as e:
            raise ParseCertificateError(path, str(e)) from e
        logger.debug(f"Loaded CA certificate from {path}")

    if settings.client_cert is not None:
        _read_text(settings.client_cert)
        if settings.client_key is not None:
            _read_text(settings.client_key)
        try:
            context.load_cert_chain(settings.client_cert, settings.client_key)
        except (ssl.SSLError, ValueError) as e:
            raise ParseCertificateError(settings.client_cert, str(e)) from e
        logger.debug(f"Loaded client certificate from {settings.client_cert}")

    return context
