"""Reminders feature: model, owner API and the due-reminder dispatcher."""

from __future__ import annotations

from .dispatcher import ReminderDispatcher, SweepReport
from .models import Reminder, ReminderStatus, ReminderType
from .recurrence import RecurrencePattern, next_occurrence
from .repository import ReminderRepository, get_reminder_repository
from .service import ReminderNotEditableError, ReminderService

__all__ = [
    "RecurrencePattern",
    "Reminder",
    "ReminderDispatcher",
    "ReminderNotEditableError",
    "ReminderRepository",
    "ReminderService",
    "ReminderStatus",
    "ReminderType",
    "SweepReport",
    "get_reminder_repository",
    "next_occurrence",
]
