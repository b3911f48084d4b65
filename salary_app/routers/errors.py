"""Translate service errors into JSON responses."""
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from salary_app.core.log import get_logger
from salary_app.domain.errors import RecordNotFound, SalaryError

LOGGER = get_logger(__name__)


async def salary_error_handler(request: Request, exc: SalaryError) -> JSONResponse:
    status_code = (
        status.HTTP_404_NOT_FOUND
        if isinstance(exc, RecordNotFound)
        else status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    LOGGER.warning(
        "%s %s rejected: %s",
        request.method,
        request.url.path,
        exc.message,
        extra={"error_kind": exc.kind.value},
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind.value},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SalaryError, salary_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
