"""FastAPI application factory"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from bookkeeping_gateway.api.dependencies import get_request_id
from bookkeeping_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from bookkeeping_gateway.api.v1 import auth, catalog, customers, dashboard, debts, payments, previews, sales
from bookkeeping_gateway.config import settings
from bookkeeping_gateway.domain.exceptions import BookkeepingAPIError, ValidationFailed
from bookkeeping_gateway.infrastructure.observability.logging import setup_logging

setup_logging(settings.log_level)

V1_ROUTERS = (
    (auth.router, "auth"),
    (customers.router, "customers"),
    (debts.router, "debts"),
    (payments.router, "payments"),
    (previews.router, "previews"),
    (catalog.router, "catalog"),
    (sales.router, "sales"),
    (dashboard.router, "dashboard"),
)


async def bookkeeping_error_handler(request: Request, exc: BookkeepingAPIError) -> JSONResponse:
    """
    Upstream 4xx keep their status and message so the dashboard can show
    them as-is. Anything else is reported as a gateway failure: 503 when
    the API could not be reached, 502 otherwise.
    """
    if exc.is_client_error:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    logging.error(f"Bookkeeping API failure: {exc}", extra={"request_id": get_request_id(request)})
    status_code = 503 if exc.status_code == 503 else 502
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    logging.warning(f"Rejected request: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": exc.errors})


def create_app() -> FastAPI:
    """Build the gateway app: middleware, error mapping, probes and /v1 routes"""
    app = FastAPI(
        title="Bookkeeping Gateway",
        description="Customers, debts, payments, sales and catalog for the bookkeeping dashboard",
        version="0.1.0",
    )

    # Last added runs first, so every request has an ID before it is timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(BookkeepingAPIError, bookkeeping_error_handler)
    app.add_exception_handler(ValidationFailed, validation_failed_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "upstream": settings.bookkeeping_api_base}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
