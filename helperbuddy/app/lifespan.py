"""Application lifespan management.

Startup Order:
1. Core (logging, application info metric)
2. Database (connectivity check with retry, optional create_all)
3. Reminder scheduler (APScheduler sweep job) - conditional on configuration

Shutdown Order: reverse of startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from helperbuddy.core.settings import (
    get_app_settings,
    get_logging_settings,
    get_reminder_settings,
)
from helperbuddy.infra.logging.config import setup_logging
from helperbuddy.infra.metrics.prometheus import application_info

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)

_scheduler_started = False


async def _startup_core() -> None:
    """Initialize logging and the application info metric."""
    app = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment, "timezone": app.timezone},
    )

    application_info.labels(
        version=app.version,
        service=app.service_name,
        environment=app.environment,
    ).set(1)


async def _startup_database() -> None:
    from helperbuddy.infra.database.session import init_database

    await init_database()


async def _startup_scheduler() -> None:
    """Register and start the reminder sweep when enabled."""
    global _scheduler_started
    from helperbuddy.tasks.scheduler import setup_scheduled_jobs, start_scheduler

    if setup_scheduled_jobs(get_reminder_settings()):
        await start_scheduler()
        _scheduler_started = True


async def _shutdown_scheduler() -> None:
    global _scheduler_started
    if not _scheduler_started:
        return
    from helperbuddy.tasks.scheduler import stop_scheduler

    await stop_scheduler()
    _scheduler_started = False


async def _shutdown_database() -> None:
    from helperbuddy.infra.database.session import close_database

    await close_database()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start services in dependency order and stop them in reverse."""
    _ = app
    await _startup_core()
    await _startup_database()
    await _startup_scheduler()
    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await _shutdown_scheduler()
        await _shutdown_database()
        logger.info("Application shutdown complete")


__all__ = ["lifespan"]
