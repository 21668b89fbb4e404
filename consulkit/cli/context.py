from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from consulkit import Consul
from consulkit.api.response import ApiResponse
from consulkit.config import ClientSettings, resolve_settings
from consulkit.exceptions import (
    APIError,
    ConfigurationError,
    ConsulError,
    DeserializationError,
    EmptyResponseError,
    EncodingError,
    SerializationError,
    TransportError,
)

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    dotenv: bool
    env_file: Path
    address: str | None = None
    token: str | None = None
    token_file: str | None = None
    ca_cert: str | None = None
    ca_path: str | None = None
    client_cert: str | None = None
    client_key: str | None = None
    insecure: bool = False
    api_version: int = 1
    timeout: float | None = None

    _client: Consul | None = None

    def resolve_client_settings(self) -> ClientSettings:
        try:
            return resolve_settings(
                address=self.address,
                token=self.token,
                token_file=self.token_file,
                ca_cert=self.ca_cert,
                ca_path=self.ca_path,
                client_cert=self.client_cert,
                client_key=self.client_key,
                verify=False if self.insecure else None,
                version=self.api_version,
                timeout=self.timeout,
                log_requests=self.verbosity >= 2,
                dotenv_path=self.env_file if self.dotenv else None,
            )
        except ImportError as exc:
            raise CLIError.usage(
                "Optional .env support requires python-dotenv.",
                hint="Install the `cli` extra: pip install 'consulkit[cli]'.",
            ) from exc

    def get_client(self) -> Consul:
        if self._client is not None:
            return self._client
        self._client = Consul(settings=self.resolve_client_settings())
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, APIError):
        if exc.status_code in (401, 403):
            return 3
        if exc.status_code == 404:
            return 4
        if exc.status_code == 429 or exc.is_server_error:
            return 5
        return 1
    if isinstance(exc, ConfigurationError):
        return 2
    return 1


def _error_type(exc: Exception) -> str:
    if isinstance(exc, APIError):
        if exc.status_code == 401:
            return "auth_error"
        if exc.status_code == 403:
            return "forbidden"
        if exc.status_code == 404:
            return "not_found"
        if exc.status_code == 429:
            return "rate_limited"
        if exc.is_server_error:
            return "server_error"
        return "api_error"
    if isinstance(exc, TransportError):
        return "network_error"
    if isinstance(exc, ConfigurationError):
        return "config_error"
    if isinstance(exc, (DeserializationError, EmptyResponseError, EncodingError)):
        return "decode_error"
    if isinstance(exc, SerializationError):
        return "validation_error"
    if isinstance(exc, ConsulError):
        return "error"
    return "internal_error"


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, APIError):
        hint = None
        if exc.status_code in (401, 403):
            hint = "Check the ACL token (--token, CONSUL_HTTP_TOKEN or CONSUL_HTTP_TOKEN_FILE)."
        return ErrorInfo(
            type=_error_type(exc),
            message=exc.api_message or str(exc),
            hint=hint,
            status_code=exc.status_code,
        )
    if isinstance(exc, TransportError) and exc.__cause__ is not None:
        return ErrorInfo(
            type=_error_type(exc),
            message=str(exc),
            hint="Is the agent reachable? Set --address or CONSUL_HTTP_ADDR.",
        )
    return ErrorInfo(type=_error_type(exc), message=str(exc))


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    address: str | None,
    response: ApiResponse[Any] | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(
        duration_ms=duration_ms,
        address=address,
        consul=(response.metadata() or None) if response is not None else None,
    )
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
