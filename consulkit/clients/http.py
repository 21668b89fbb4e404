"""
HTTP execution layer.

``HTTPClient`` (sync) and ``AsyncHTTPClient`` (async) turn an ``Endpoint``
into a request, run it through the middleware pipeline and the httpx
transport, and wrap the outcome in an ``ApiResponse``. Every failure on the
way is normalized by ``classify`` into the ``ConsulError`` hierarchy.
"""

from __future__ import annotations

import logging
from functools import lru_cache
import types
from typing import Any, TypeVar, Union, get_args, get_origin
from urllib.parse import quote_plus

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import from_json

from .._version import __version__
from ..api.endpoint import Endpoint, Raw, Typed
from ..api.features import Features
from ..api.middleware import (
    AsyncRequestLoggingMiddleware,
    MiddlewareContext,
    RequestLoggingMiddleware,
)
from ..api.response import ApiResponse, build_envelope, parse_headers
from ..config import ClientSettings, build_ssl_context
from ..exceptions import (
    APIError,
    ConsulError,
    DeserializationError,
    EmptyResponseError,
    TransportBuildError,
    TransportError,
)
from .pipeline import (
    AsyncMiddleware,
    ConsulRequest,
    ConsulResponse,
    Middleware,
    QueryParam,
    compose,
    compose_async,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = f"consulkit/{__version__}"

# Failures raised by httpx before a response was obtained
_TRANSPORT_FAILURES = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


# =============================================================================
# Classification and decoding
# =============================================================================


def classify(failure: httpx.Response | ConsulResponse | Exception) -> ConsulError:
    """
    Map a failed HTTP exchange to the client error taxonomy.

    - a non-2xx response becomes ``APIError`` carrying the body text
    - an httpx exception becomes ``TransportError`` (cause chained)
    - a ``ConsulError`` is returned unchanged
    """
    if isinstance(failure, (httpx.Response, ConsulResponse)):
        text = failure.content.decode("utf-8", errors="replace").strip()
        return APIError(failure.status_code, text or None)
    if isinstance(failure, ConsulError):
        return failure
    error = TransportError(f"Error sending HTTP request: {failure}")
    error.__cause__ = failure
    return error


@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


_COLLECTION_ORIGINS = (list, dict, set, frozenset, tuple)


def _needs_value(type_: Any) -> bool:
    """True when ``type_`` is neither optional nor a collection."""
    origin = get_origin(type_)
    if origin in (Union, types.UnionType):
        return type(None) not in get_args(type_)
    return (origin or type_) not in _COLLECTION_ORIGINS


def _is_empty_json(content: bytes) -> bool:
    try:
        value = from_json(content)
    except ValueError:
        return False
    return value is None or value == [] or value == {}


def decode_typed(type_: Any, content: bytes, *, source: str = "response") -> Any:
    """
    Decode a JSON body into ``type_``.

    Raises:
        EmptyResponseError: The body is empty, or is an empty collection/null
            where the type needs a value.
        DeserializationError: Any other mismatch between body and type.
    """
    if not content.strip():
        raise EmptyResponseError(f"Empty body in {source}")
    if _needs_value(type_) and _is_empty_json(content):
        raise EmptyResponseError(f"No value in {source}")
    try:
        return _adapter(type_).validate_json(content)
    except ValidationError as e:
        if _is_empty_json(content):
            raise EmptyResponseError(f"No value in {source}") from e
        raise DeserializationError(
            f"Failed to decode {source}: {e.error_count()} validation error(s)"
        ) from e


# =============================================================================
# Request building
# =============================================================================


def build_request(address: str, endpoint: Endpoint) -> ConsulRequest:
    """Build the (not yet prefixed) request for ``endpoint``."""
    return ConsulRequest(
        method=endpoint.route.method,
        url=f"{address.rstrip('/')}/{endpoint.resolve_path()}",
        params=list(endpoint.query_params()),
        content=endpoint.body_bytes(),
        context={"endpoint": type(endpoint).__name__},
    )


def encode_query(params: list[QueryParam]) -> str:
    """Encode params in order; ``None`` values become bare keys (``?stale``)."""
    parts: list[str] = []
    for name, value in params:
        if value is None:
            parts.append(quote_plus(name))
        else:
            parts.append(f"{quote_plus(name)}={quote_plus(value)}")
    return "&".join(parts)


def _request_url(req: ConsulRequest) -> str:
    if not req.params:
        return req.url
    return f"{req.url}?{encode_query(req.params)}"


def _to_consul_response(response: httpx.Response) -> ConsulResponse:
    return ConsulResponse(
        status_code=response.status_code,
        headers=list(response.headers.items()),
        content=response.content,
        context={
            "elapsed_seconds": response.elapsed.total_seconds(),
            "http_version": response.http_version,
        },
    )


def _client_options(settings: ClientSettings) -> dict[str, Any]:
    return {
        "verify": build_ssl_context(settings),
        "timeout": httpx.Timeout(settings.timeout),
        "headers": {"User-Agent": USER_AGENT},
        "follow_redirects": False,
    }


def _require_typed(endpoint: Endpoint) -> Typed:
    shape = endpoint.route.response
    if not isinstance(shape, Typed):
        raise ValueError(
            f"{type(endpoint).__name__} does not declare a typed response; "
            "use execute_empty() or execute_raw()"
        )
    return shape


# =============================================================================
# Sync client
# =============================================================================


class HTTPClient:
    """Synchronous executor backed by ``httpx.Client``."""

    def __init__(self, settings: ClientSettings):
        self._settings = settings
        self._context = MiddlewareContext.for_version(settings.version, settings.token)
        options = _client_options(settings)
        try:
            self._client = httpx.Client(transport=settings.transport, **options)
        except (TypeError, ValueError, httpx.HTTPError) as e:
            raise TransportBuildError(f"Failed to build HTTP client: {e}") from e
        logger.debug(f"Using API version {settings.version} at {settings.address}")

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def execute(self, endpoint: Endpoint) -> ApiResponse[Any]:
        """Execute ``endpoint`` according to its declared response shape."""
        shape = endpoint.route.response
        if isinstance(shape, Typed):
            return self.execute_typed(endpoint)
        if isinstance(shape, Raw):
            return self.execute_raw(endpoint)
        return self.execute_empty(endpoint)

    def execute_empty(self, endpoint: Endpoint) -> ApiResponse[None]:
        logger.debug(f"Executing {type(endpoint).__name__} and expecting no response")
        response = self._send(endpoint)
        return build_envelope(None, parse_headers(response.header))

    def execute_raw(self, endpoint: Endpoint) -> ApiResponse[bytes]:
        logger.debug(f"Executing {type(endpoint).__name__} and expecting a raw response")
        response = self._send(endpoint)
        return build_envelope(response.content, parse_headers(response.header))

    def execute_typed(self, endpoint: Endpoint) -> ApiResponse[Any]:
        shape = _require_typed(endpoint)
        logger.debug(f"Executing {type(endpoint).__name__} and expecting a response")
        response = self._send(endpoint)
        metadata = parse_headers(response.header)
        payload = decode_typed(shape.type_, response.content, source=type(endpoint).__name__)
        return build_envelope(payload, metadata)

    def _middlewares(self, features: Features | None) -> list[Middleware]:
        middlewares: list[Middleware] = [self._context.bind(features)]
        if self._settings.log_requests:
            middlewares.append(RequestLoggingMiddleware())
        return middlewares

    def _send(self, endpoint: Endpoint) -> ConsulResponse:
        request = build_request(self._settings.address, endpoint)
        pipeline = compose(self._middlewares(endpoint.features), self._transport_call)
        response = pipeline(request)
        if not response.is_success:
            raise classify(response)
        return response

    def _transport_call(self, req: ConsulRequest) -> ConsulResponse:
        try:
            response = self._client.request(
                req.method, _request_url(req), headers=req.headers, content=req.content
            )
        except _TRANSPORT_FAILURES as e:
            raise classify(e) from e
        return _to_consul_response(response)


# =============================================================================
# Async client
# =============================================================================


class AsyncHTTPClient:
    """
    Asynchronous executor backed by ``httpx.AsyncClient``.

    Cancelling the awaiting task cancels the in-flight request; nothing keeps
    running in the background.
    """

    def __init__(self, settings: ClientSettings):
        self._settings = settings
        self._context = MiddlewareContext.for_version(settings.version, settings.token)
        options = _client_options(settings)
        try:
            self._client = httpx.AsyncClient(transport=settings.async_transport, **options)
        except (TypeError, ValueError, httpx.HTTPError) as e:
            raise TransportBuildError(f"Failed to build HTTP client: {e}") from e
        logger.debug(f"Using API version {settings.version} at {settings.address}")

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncHTTPClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def execute(self, endpoint: Endpoint) -> ApiResponse[Any]:
        shape = endpoint.route.response
        if isinstance(shape, Typed):
            return await self.execute_typed(endpoint)
        if isinstance(shape, Raw):
            return await self.execute_raw(endpoint)
        return await self.execute_empty(endpoint)

    async def execute_empty(self, endpoint: Endpoint) -> ApiResponse[None]:
        logger.debug(f"Executing {type(endpoint).__name__} and expecting no response")
        response = await self._send(endpoint)
        return build_envelope(None, parse_headers(response.header))

    async def execute_raw(self, endpoint: Endpoint) -> ApiResponse[bytes]:
        logger.debug(f"Executing {type(endpoint).__name__} and expecting a raw response")
        response = await self._send(endpoint)
        return build_envelope(response.content, parse_headers(response.header))

    async def execute_typed(self, endpoint: Endpoint) -> ApiResponse[Any]:
        shape = _require_typed(endpoint)
        logger.debug(f"Executing {type(endpoint).__name__} and expecting a response")
        response = await self._send(endpoint)
        metadata = parse_headers(response.header)
        payload = decode_typed(shape.type_, response.content, source=type(endpoint).__name__)
        return build_envelope(payload, metadata)

    def _middlewares(self, features: Features | None) -> list[AsyncMiddleware]:
        middlewares: list[AsyncMiddleware] = [self._context.bind(features).call_async]
        if self._settings.log_requests:
            middlewares.append(AsyncRequestLoggingMiddleware())
        return middlewares

    async def _send(self, endpoint: Endpoint) -> ConsulResponse:
        request = build_request(self._settings.address, endpoint)
        pipeline = compose_async(self._middlewares(endpoint.features), self._transport_call)
        response = await pipeline(request)
        if not response.is_success:
            raise classify(response)
        return response

    async def _transport_call(self, req: ConsulRequest) -> ConsulResponse:
        try:
            response = await self._client.request(
                req.method, _request_url(req), headers=req.headers, content=req.content
            )
        except _TRANSPORT_FAILURES as e:
            raise classify(e) from e
        return _to_consul_response(response)
