"""Pydantic schemas for the reminders feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from helperbuddy.features.reminders.models import ReminderStatus, ReminderType
from helperbuddy.features.reminders.recurrence import RecurrencePattern


def _strip_required(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        msg = "must not be blank"
        raise ValueError(msg)
    return stripped


class ReminderBase(BaseModel):
    """Shared attributes for reminder payloads."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    reminder_type: ReminderType = ReminderType.EMAIL
    scheduled_time: datetime = Field(
        ...,
        description="When to deliver. Naive values are read in the server's timezone.",
    )


class ReminderCreate(ReminderBase):
    """Payload used when creating a reminder.

    Omitted recipients are filled from the owner's profile.
    """

    is_recurring: bool = False
    recurring_pattern: RecurrencePattern | None = None
    recipient_email: EmailStr | None = None
    recipient_phone: str | None = Field(default=None, max_length=20)

    @field_validator("title", "message")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)

    @model_validator(mode="after")
    def check_recurrence(self) -> ReminderCreate:
        """A recurring reminder needs a real pattern."""
        if self.is_recurring and self.recurring_pattern in (None, RecurrencePattern.NONE):
            msg = "recurring_pattern is required when is_recurring is true"
            raise ValueError(msg)
        if not self.is_recurring:
            self.recurring_pattern = None
        return self


class ReminderUpdate(BaseModel):
    """Partial update of a pending reminder."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    message: str | None = Field(default=None, min_length=1)
    reminder_type: ReminderType | None = None
    scheduled_time: datetime | None = None
    is_recurring: bool | None = None
    recurring_pattern: RecurrencePattern | None = None
    recipient_email: EmailStr | None = None
    recipient_phone: str | None = Field(default=None, max_length=20)

    @field_validator("title", "message")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return None if v is None else _strip_required(v)

    @model_validator(mode="after")
    def check_recurrence(self) -> ReminderUpdate:
        """Reject an explicit empty pattern; the stored one is checked by the service."""
        if (
            self.is_recurring
            and "recurring_pattern" in self.model_fields_set
            and self.recurring_pattern in (None, RecurrencePattern.NONE)
        ):
            msg = "recurring_pattern is required when is_recurring is true"
            raise ValueError(msg)
        return self


class ReminderResponse(BaseModel):
    """Representation returned from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    title: str
    message: str
    reminder_type: ReminderType
    scheduled_time: datetime
    is_recurring: bool
    recurring_pattern: str | None
    status: ReminderStatus
    sent_at: datetime | None
    recipient_email: str | None
    recipient_phone: str | None
    created_at: datetime
    updated_at: datetime


__all__ = [
    "ReminderBase",
    "ReminderCreate",
    "ReminderResponse",
    "ReminderUpdate",
]
