from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers, rate
limiter state) so tests can build isolated instances.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from areca.api.routes import (
    auth_router,
    configurations_router,
    dashboard_router,
    dispatch_router,
    employees_router,
    health_router,
    payments_router,
    users_router,
    work_records_router,
)
from areca.core.config import settings
from areca.core.exception_handlers import setup_exception_handlers
from areca.core.logging import configure_logging
from areca.core.middleware import request_id_middleware
from areca.core.openapi import apply_openapi_customizations
from areca.core.rate_limit import RateLimiterRegistry
from areca.db.session import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.database.auto_create:
        init_db()
    logger.info("app.started", extra={"debug": settings.app.debug})
    yield
    logger.info("app.stopped")


def create_app(rate_limiters: RateLimiterRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiters: Limiter registry to serve requests with; built from
            settings with a fresh in-memory bucket store when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="ARECA API",
        description=(
            "Backend for small collection businesses: employees, daily work "
            "records in kilograms, payments and dispatches. Payment status "
            "reports the kilograms collected since each employee's latest "
            "payment. Requires a Bearer session token and applies per-route "
            "rate limits."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    # Bucket store lives with this app instance only
    app.state.rate_limiters = rate_limiters or RateLimiterRegistry.from_settings(settings.rate_limit)

    # Middleware
    app.middleware("http")(request_id_middleware)
    origins = [o.strip() for o in (settings.app.cors_origins or "").split(",") if o.strip()]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Retry-After", settings.log.request_id_header],
        )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(employees_router)
    app.include_router(work_records_router)
    app.include_router(payments_router)
    app.include_router(dispatch_router)
    app.include_router(configurations_router)
    app.include_router(dashboard_router)
    app.include_router(health_router)

    # OpenAPI customizations (security scheme, tags, exemptions)
    apply_openapi_customizations(app)

    return app
