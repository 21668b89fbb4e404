"""
Consul request middleware.

``MiddlewareContext`` holds the per-client values (API version and ACL token)
and is built once. ``bind(features)`` produces the per-call
``EndpointMiddleware`` that rewrites each outgoing request:

1. the API version is inserted as the first path segment (``/v1/kv/foo``)
2. ``X-Consul-Token`` is set when a token is configured
3. request features (blocking, cached, filter, consistency) are applied
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from ..clients.pipeline import AsyncPipeline, ConsulRequest, ConsulResponse, Pipeline
from ..exceptions import TransportError
from .features import Features, apply_features

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Consul-Token"


@dataclass(frozen=True, slots=True)
class MiddlewareContext:
    version: str = "v1"
    token: str | None = None

    @classmethod
    def for_version(cls, version: int, token: str | None = None) -> MiddlewareContext:
        return cls(version=f"v{version}", token=token)

    def bind(self, features: Features | None = None) -> EndpointMiddleware:
        return EndpointMiddleware(context=self, features=features)


@dataclass(frozen=True, slots=True)
class EndpointMiddleware:
    """Per-call middleware; usable in both the sync and async pipelines."""

    context: MiddlewareContext
    features: Features | None = None

    def on_request(self, request: ConsulRequest) -> None:
        self._prefix_version(request)

        if self.context.token is not None:
            logger.debug(f"Adding {TOKEN_HEADER} header")
            request.set_header(TOKEN_HEADER, self.context.token)

        if self.features is not None:
            apply_features(self.features, request)

    def on_response(self, response: ConsulResponse) -> None:
        """Hook for response post-processing; currently leaves the response as is."""
        return None

    def __call__(self, req: ConsulRequest, next: Pipeline) -> ConsulResponse:
        self.on_request(req)
        response = next(req)
        self.on_response(response)
        return response

    async def call_async(self, req: ConsulRequest, next: AsyncPipeline) -> ConsulResponse:
        self.on_request(req)
        response = await next(req)
        self.on_response(response)
        return response

    def _prefix_version(self, request: ConsulRequest) -> None:
        if request.context.get("version_prefixed"):
            return
        try:
            parts = urlsplit(request.url)
        except ValueError as e:
            raise TransportError(f"Cannot add API version to URL {request.url!r}") from e
        if not parts.scheme or not parts.netloc:
            raise TransportError(f"Cannot add API version to URL {request.url!r}")
        path = parts.path if parts.path.startswith("/") else f"/{parts.path}"
        path = f"/{self.context.version}{path}"
        request.url = urlunsplit(parts._replace(path=path))
        request.context["version_prefixed"] = True
        logger.debug(f"Prefixed {self.context.version} to request path: {path}")


def _loggable_url(url: str) -> str:
    # Filter expressions and session IDs can end up in the query string
    return url.split("?", 1)[0]


class RequestLoggingMiddleware:
    """Logs each request and its outcome; never logs header values."""

    def __call__(self, req: ConsulRequest, next: Pipeline) -> ConsulResponse:
        logger.debug(f"-> {req.method} {_loggable_url(req.url)}")
        started = time.monotonic()
        response = next(req)
        self._log_response(req, response, time.monotonic() - started)
        return response

    def _log_response(self, req: ConsulRequest, response: ConsulResponse, elapsed: float) -> None:
        level = logging.DEBUG if response.is_success else logging.INFO
        logger.log(
            level,
            f"<- {response.status_code} {req.method} {_loggable_url(req.url)} "
            f"({elapsed * 1000:.1f}ms)",
        )


class AsyncRequestLoggingMiddleware(RequestLoggingMiddleware):
    async def __call__(  # type: ignore[override]
        self, req: ConsulRequest, next: AsyncPipeline
    ) -> ConsulResponse:
        logger.debug(f"-> {req.method} {_loggable_url(req.url)}")
        started = time.monotonic()
        response = await next(req)
        self._log_response(req, response, time.monotonic() - started)
        return response
