"""SQLAlchemy models for the reminders feature."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from helperbuddy.core.database import UTCDateTime, UUIDTimestampedBase
from helperbuddy.features.reminders.recurrence import RecurrencePattern, parse_pattern


class ReminderType(str, Enum):
    """Delivery channel(s) of a reminder."""

    EMAIL = "email"
    SMS = "sms"
    BOTH = "both"

    @property
    def uses_email(self) -> bool:
        return self in (ReminderType.EMAIL, ReminderType.BOTH)

    @property
    def uses_sms(self) -> bool:
        return self in (ReminderType.SMS, ReminderType.BOTH)


class ReminderStatus(str, Enum):
    """Lifecycle state. ``sent`` and ``failed`` are terminal."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Reminder(UUIDTimestampedBase):
    """A single scheduled notification.

    Each occurrence of a recurring reminder is its own row: once a row
    leaves ``pending`` it is never dispatched again, and delivery of a
    recurring row inserts a fresh ``pending`` row for the next occurrence.
    """

    __tablename__ = "reminders"
    __table_args__ = (
        Index("ix_reminders_status_scheduled_time", "status", "scheduled_time"),
    )

    owner_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text(), nullable=False)
    reminder_type: Mapped[ReminderType] = mapped_column(
        SAEnum(ReminderType, native_enum=False, length=10, values_callable=_enum_values),
        nullable=False,
        default=ReminderType.EMAIL,
    )
    scheduled_time: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        index=True,
        comment="Absolute instant the reminder is due (stored as UTC)",
    )

    # Recurrence
    is_recurring: Mapped[bool] = mapped_column(Boolean(), default=False, nullable=False)
    recurring_pattern: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="none, daily, weekly, monthly or yearly",
    )

    status: Mapped[ReminderStatus] = mapped_column(
        SAEnum(ReminderStatus, native_enum=False, length=10, values_callable=_enum_values),
        nullable=False,
        default=ReminderStatus.PENDING,
    )
    sent_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    # Resolved at creation time, fixed afterwards
    recipient_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recipient_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    @property
    def recurrence(self) -> RecurrencePattern | None:
        """Effective pattern, or None when the reminder fires once."""
        if not self.is_recurring:
            return None
        pattern = parse_pattern(self.recurring_pattern)
        if pattern is RecurrencePattern.NONE:
            return None
        return pattern

    @property
    def is_pending(self) -> bool:
        return self.status == ReminderStatus.PENDING

    def spawn_next(self, scheduled_time: datetime) -> Reminder:
        """Build the pending row for the next occurrence.

        Owner, content, channel, recipients and recurrence carry over.
        """
        return Reminder(
            owner_id=self.owner_id,
            title=self.title,
            message=self.message,
            reminder_type=self.reminder_type,
            scheduled_time=scheduled_time,
            is_recurring=self.is_recurring,
            recurring_pattern=self.recurring_pattern,
            status=ReminderStatus.PENDING,
            recipient_email=self.recipient_email,
            recipient_phone=self.recipient_phone,
        )


__all__ = ["Reminder", "ReminderStatus", "ReminderType"]
