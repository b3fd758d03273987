"""Database settings.

Environment variables use DB_ prefix.
Example: DB_DATABASE_URL=sqlite+aiosqlite:///./helperbuddy.db
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Async SQLAlchemy database configuration."""

    database_url: str = Field(
        default="sqlite+aiosqlite:///./helperbuddy.db",
        min_length=1,
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Echo SQL statements to the log")

    # Startup behaviour
    create_tables_on_startup: bool = Field(
        default=True,
        description="Run metadata.create_all during application startup",
    )
    startup_retry_attempts: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum connection attempts during startup",
    )
    startup_retry_delay: float = Field(
        default=1.0,
        ge=0.1,
        le=60.0,
        description="Initial delay between startup connection attempts in seconds",
    )
    startup_retry_timeout: float = Field(
        default=60.0,
        ge=1.0,
        le=600.0,
        description="Give up connecting after this many seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured backend is SQLite."""
        return self.database_url.startswith("sqlite")

    def get_sqlalchemy_url(self) -> str:
        """Get the async SQLAlchemy URL."""
        return self.database_url
