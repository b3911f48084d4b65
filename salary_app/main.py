"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI

from salary_app.core import get_logger, get_settings
from salary_app.core.log import init_logging
from salary_app.middleware import RequestContextMiddleware
from salary_app.routers import (
    audit_router,
    commission_router,
    salaries_router,
    users_router,
)
from salary_app.routers.errors import register_exception_handlers

LOGGER = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    init_logging(settings.logging)

    app = FastAPI(title="Salary Manager", version="0.1.0")
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(salaries_router)
    app.include_router(commission_router)
    app.include_router(users_router)
    app.include_router(audit_router)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app
