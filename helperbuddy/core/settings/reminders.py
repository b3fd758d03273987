"""Reminder scheduling settings.

Environment variables use REMINDER_ prefix.
Example: REMINDER_SCHEDULER_ENABLED=false
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReminderSettings(BaseSettings):
    """Polling scheduler and reminder API configuration."""

    scheduler_enabled: bool = Field(
        default=True,
        description="Run the due-reminder sweep inside the API process",
    )
    poll_interval_seconds: int = Field(
        default=60,
        ge=1,
        le=3600,
        description="Seconds between due-reminder sweeps",
    )
    due_window_seconds: int = Field(
        default=60,
        ge=1,
        le=3600,
        description="Tolerance window: reminders scheduled up to this far in the past are due",
    )
    misfire_grace_seconds: int = Field(
        default=30,
        ge=1,
        le=3600,
        description="How late a sweep may start before APScheduler drops it",
    )
    upcoming_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum reminders returned by the upcoming list",
    )

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
