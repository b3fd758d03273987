"""Logging settings.

Environment variables use LOG_ prefix.
Example: LOG_LEVEL=debug, LOG_JSON=false, LOG_FILE_ENABLED=true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where log records go and how they are rendered."""

    service_name: str = Field(
        default="helperbuddy",
        description="Static `service` field on every JSON record",
    )
    level: LogLevel = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(
        default=True,
        alias="json",
        description="JSON Lines output; plain text when false",
    )
    console_enabled: bool = Field(default=True, description="Log to stderr")

    # Rotating file output, off unless LOG_FILE_ENABLED=true
    file_enabled: bool = Field(default=False, description="Also log to file_path")
    file_path: Path = Field(
        default=Path("logs/helperbuddy.log.jsonl"),
        description="Log file location; parent directories are created",
    )
    file_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Rotate the log file after this many bytes",
    )
    file_backup_count: int = Field(default=5, ge=0, le=100, description="Rotated files kept")

    include_context: bool = Field(
        default=True,
        description="Copy the log context (request_id, sweep_id, reminder_id) onto records",
    )
    capture_warnings: bool = Field(default=True, description="Route warnings.warn through logging")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for configure_logging()."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "file_path": str(self.file_path) if self.file_enabled else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
        }


__all__ = ["LogLevel", "LoggingSettings"]
