"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from budget_ledger.api.dependencies import get_request_id
from budget_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from budget_ledger.api.v1 import categories, maintenance, settings as settings_routes, summaries, transactions
from budget_ledger.domain.exceptions import (
    DomainException,
    DuplicateCategoryError,
    FeedAPIError,
    NotFoundError,
    ValidationError,
)
from budget_ledger.infrastructure.database.session import init_db
from budget_ledger.infrastructure.observability.logging import setup_logging
from budget_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, DuplicateCategoryError):
        return 409
    if isinstance(exc, FeedAPIError):
        return 503
    return 422


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and storage failures to HTTP responses"""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        status_code = _status_for(exc)
        logging.warning(f"Request rejected: {exc}", extra={"request_id": get_request_id(request), "status": status_code})
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        logging.error(f"Storage error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Budget Ledger",
        description="Billing-cycle aware monthly summaries and budget derivation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(summaries.router, prefix="/api", tags=["summaries"])
    app.include_router(categories.router, prefix="/api", tags=["categories"])
    app.include_router(transactions.router, prefix="/api", tags=["transactions"])
    app.include_router(settings_routes.router, prefix="/api", tags=["settings"])
    app.include_router(maintenance.router, prefix="/api", tags=["maintenance"])

    return app


app = create_app()
