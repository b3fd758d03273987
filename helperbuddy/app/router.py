"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from helperbuddy.core.settings import get_app_settings
from helperbuddy.features.health.router import router as health_router
from helperbuddy.features.metrics.router import router as metrics_router
from helperbuddy.features.reminders.router import router as reminders_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from helperbuddy.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    # Metrics endpoint (no prefix - accessible at /metrics)
    app.include_router(metrics_router)

    app.include_router(reminders_router, prefix=api_prefix)
    app.include_router(health_router, prefix=api_prefix)

    logger.info(
        "Routers registered",
        extra={"api_prefix": api_prefix, "routes": len(app.routes)},
    )


__all__ = ["setup_routers"]
