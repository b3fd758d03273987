"""Database commands."""

import sys

import click

from helperbuddy.cli.utils import coro, error, info, success


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command(name="init")
@coro
async def init() -> None:
    """Check connectivity and create missing tables."""
    from helperbuddy.core.database import Base
    from helperbuddy.core.models import load_models
    from helperbuddy.infra.database.session import close_database, engine, init_database

    info(f"Database: {engine.url.render_as_string(hide_password=True)}")
    try:
        await init_database()
        load_models()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        error(f"Database initialization failed: {e}")
        sys.exit(1)
    finally:
        await close_database()

    success("Database ready")
