"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from helperbuddy.app.exception_handlers import configure_exception_handlers
from helperbuddy.app.lifespan import lifespan
from helperbuddy.app.middleware import configure_middleware
from helperbuddy.app.router import setup_routers
from helperbuddy.core.settings import get_app_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # Exception handlers before middleware
    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app, app_settings)

    return app


# Application instance for uvicorn
app = create_app()
