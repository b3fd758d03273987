"""Process-wide settings, read from the environment on first use.

Call clear_all_settings_cache() after changing the environment (tests).
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .logs import LoggingSettings
from .reminders import ReminderSettings
from .sms import SmsSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_email_settings() -> EmailSettings:
    return EmailSettings()


@lru_cache(maxsize=1)
def get_sms_settings() -> SmsSettings:
    return SmsSettings()


@lru_cache(maxsize=1)
def get_reminder_settings() -> ReminderSettings:
    return ReminderSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


def clear_all_settings_cache() -> None:
    """Drop every cached settings instance (tests and reloads)."""
    get_app_settings.cache_clear()
    get_db_settings.cache_clear()
    get_email_settings.cache_clear()
    get_sms_settings.cache_clear()
    get_reminder_settings.cache_clear()
    get_logging_settings.cache_clear()
