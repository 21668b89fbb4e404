"""
Internal request pipeline primitives.

Requests and responses are modelled independently of the HTTP transport so the
Consul-specific behaviour (version prefix, ACL token, features, logging) can be
layered on as middleware.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeAlias, TypedDict, cast

from ..exceptions import TransportError

Header: TypeAlias = tuple[str, str]
# A value of None marks a presence-only key (``?stale``).
QueryParam: TypeAlias = tuple[str, str | None]


class RequestContext(TypedDict, total=False):
    endpoint: str
    version_prefixed: bool


class ResponseContext(TypedDict, total=False):
    elapsed_seconds: float
    http_version: str


@dataclass(slots=True)
class ConsulRequest:
    method: str
    url: str
    headers: list[Header] = field(default_factory=list)
    params: list[QueryParam] = field(default_factory=list)
    content: bytes | None = None
    context: RequestContext = field(default_factory=lambda: cast(RequestContext, {}))

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def set_header(self, name: str, value: str) -> None:
        """Set a header, replacing any existing value for the same name."""
        if not _valid_header_value(value):
            raise TransportError(f"Invalid characters in value for header {name!r}")
        lowered = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != lowered]
        self.headers.append((name, value))


@dataclass(slots=True)
class ConsulResponse:
    status_code: int
    headers: list[Header]
    content: bytes
    context: ResponseContext = field(default_factory=lambda: cast(ResponseContext, {}))

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


def _valid_header_value(value: str) -> bool:
    # Visible ASCII, space and tab only; httpx encodes header values as ASCII.
    for ch in value:
        code = ord(ch)
        if ch == "\t":
            continue
        if code < 0x20 or code > 0x7E:
            return False
    return True


Pipeline: TypeAlias = Callable[[ConsulRequest], ConsulResponse]
AsyncPipeline: TypeAlias = Callable[[ConsulRequest], Awaitable[ConsulResponse]]


class Middleware(Protocol):
    def __call__(self, req: ConsulRequest, next: Pipeline) -> ConsulResponse: ...


class AsyncMiddleware(Protocol):
    async def __call__(self, req: ConsulRequest, next: AsyncPipeline) -> ConsulResponse: ...


def compose(middlewares: Sequence[Middleware], terminal: Pipeline) -> Pipeline:
    pipeline = terminal
    for middleware in reversed(middlewares):
        next_pipeline = pipeline

        def _wrapped(
            req: ConsulRequest, *, _mw: Middleware = middleware, _n: Pipeline = next_pipeline
        ) -> ConsulResponse:
            return _mw(req, _n)

        pipeline = _wrapped
    return pipeline


def compose_async(middlewares: Sequence[AsyncMiddleware], terminal: AsyncPipeline) -> AsyncPipeline:
    pipeline = terminal
    for middleware in reversed(middlewares):
        next_pipeline = pipeline

        async def _wrapped(
            req: ConsulRequest,
            *,
            _mw: AsyncMiddleware = middleware,
            _n: AsyncPipeline = next_pipeline,
        ) -> ConsulResponse:
            return await _mw(req, _n)

        pipeline = _wrapped
    return pipeline
