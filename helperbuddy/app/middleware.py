"""HTTP middleware: request metrics and per-request log context."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING
import uuid

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from helperbuddy.infra.logging import clear_log_context, set_log_context
from helperbuddy.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_total,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import FastAPI, Request, Response


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id, method and path to the log context of each request.

    An incoming ``X-Request-ID`` is reused; otherwise one is generated and
    echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        clear_log_context()
        set_log_context(request_id=request_id, method=request.method, path=request.url.path)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def endpoint_label(path: str, route_path: str | None) -> str:
    """Route template for ``path``, e.g. ``/api/reminders/{reminder_id}``.

    Depending on the FastAPI version, an included router's route path may
    or may not carry the include prefix (``/health`` vs ``/api/health``).
    The template replaces the trailing segments of the request path, so any
    prefix missing from it is taken from the path itself.
    """
    if route_path is None:
        return path
    segments = [s for s in path.strip("/").split("/") if s]
    template = [s for s in route_path.strip("/").split("/") if s]
    prefix = segments[: max(len(segments) - len(template), 0)]
    return "/" + "/".join(prefix + template)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect HTTP request counts and latencies.

    Uses the route path template as the endpoint label to keep cardinality
    low, and attaches the active trace id as an exemplar when there is one.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time

            route = request.scope.get("route")
            endpoint = endpoint_label(request.url.path, getattr(route, "path", None))

            span_context = trace.get_current_span().get_span_context()
            exemplar = (
                {"trace_id": format(span_context.trace_id, "032x")}
                if span_context.is_valid
                else None
            )
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                duration, exemplar=exemplar
            )
            http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc(
                exemplar=exemplar
            )


def configure_middleware(app: FastAPI) -> None:
    """Install middleware. The last added runs first."""
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)


__all__ = ["MetricsMiddleware", "RequestContextMiddleware", "configure_middleware"]
