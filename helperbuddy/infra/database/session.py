"""Database session management with the async SQLAlchemy engine."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from helperbuddy.core.settings import get_app_settings, get_db_settings
from helperbuddy.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()
app_settings = get_app_settings()

engine = create_async_engine(
    db_settings.get_sqlalchemy_url(),
    echo=db_settings.echo or app_settings.debug,
    pool_pre_ping=not db_settings.is_sqlite,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Session for work outside a request, e.g. a sweep:

        async with get_async_session() as session:
            reminders = await repo.find_due(session, window_start=..., window_end=...)
    """
    async with AsyncSessionLocal() as session:
        yield session


@retry(
    max_attempts=db_settings.startup_retry_attempts,
    initial_delay=db_settings.startup_retry_delay,
    max_delay=30.0,
    exponential_base=2.0,
    jitter=True,
    exceptions=(OperationalError, OSError, TimeoutError),
    stop_after_delay=db_settings.startup_retry_timeout,
)
async def _ping_database() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def init_database() -> None:
    """Verify connectivity (with retry) and create missing tables.

    Raises:
        RetryError: If the database stays unreachable.
    """
    logger.info(
        "Connecting to database",
        extra={
            "max_attempts": db_settings.startup_retry_attempts,
            "initial_delay": db_settings.startup_retry_delay,
        },
    )

    try:
        await _ping_database()
    except Exception as e:
        logger.error(
            "Failed to connect to database",
            extra={"url": engine.url.render_as_string(hide_password=True), "error": str(e)},
        )
        raise

    if db_settings.create_tables_on_startup:
        from helperbuddy.core.database import Base
        from helperbuddy.core.models import load_models

        load_models()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database ready",
        extra={"url": engine.url.render_as_string(hide_password=True)},
    )


async def close_database() -> None:
    """Dispose the engine during application shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")


__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "engine",
    "get_async_session",
    "init_database",
]
