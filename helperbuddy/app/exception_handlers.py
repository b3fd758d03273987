"""Global exception handlers for FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from helperbuddy.core.database import NotFoundError, RepositoryError

logger = logging.getLogger(__name__)


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Map a missing entity to 404."""
    logger.info(
        "Entity not found",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "entity": exc.model_name,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": f"{exc.model_name} not found"},
    )


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """Map any other store failure to 503 without leaking driver details."""
    logger.error(
        "Repository error",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable"},
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the handlers. More specific classes first."""
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RepositoryError, repository_error_handler)  # type: ignore[arg-type]


__all__ = ["configure_exception_handlers"]
