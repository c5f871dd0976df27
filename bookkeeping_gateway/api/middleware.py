"""Request tracing and HTTP metrics middleware"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from bookkeeping_gateway.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"

# Probe and scrape endpoints are not timed
UNMEASURED_PATHS = {"/metrics", "/health"}


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID, reusing the caller's ``X-Request-ID`` when
    the dashboard sends one, and echo it back on the response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Time requests, labelled by route template so ids do not explode cardinality"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNMEASURED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(elapsed)

        if response.status_code >= 500:
            logging.warning(
                f"{request.method} {endpoint} answered {response.status_code} in {elapsed * 1000:.0f}ms",
                extra={"request_id": getattr(request.state, "request_id", "unknown")},
            )
        return response
