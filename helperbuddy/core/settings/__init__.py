"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/email/sms/reminders/logging), read from
environment variables or a .env file, frozen, and cached by loader.

Import settings via cached loaders:
    from helperbuddy.core.settings import get_app_settings
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .loader import (
    clear_all_settings_cache,
    get_app_settings,
    get_db_settings,
    get_email_settings,
    get_logging_settings,
    get_reminder_settings,
    get_sms_settings,
)
from .logs import LoggingSettings
from .reminders import ReminderSettings
from .sms import SmsSettings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "EmailSettings",
    "LoggingSettings",
    "ReminderSettings",
    "SmsSettings",
    "clear_all_settings_cache",
    "get_app_settings",
    "get_db_settings",
    "get_email_settings",
    "get_logging_settings",
    "get_reminder_settings",
    "get_sms_settings",
]
