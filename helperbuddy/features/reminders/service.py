"""Service layer for owner-facing reminder operations.

Transaction boundaries belong to the caller (the router commits); methods
here only flush.
"""
from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from typing import TYPE_CHECKING

from helperbuddy.core.database import NotFoundError
from helperbuddy.core.services.base import BaseService
from helperbuddy.features.reminders.models import Reminder, ReminderStatus, ReminderType
from helperbuddy.features.reminders.recurrence import RecurrencePattern
from helperbuddy.features.reminders.repository import (
    ReminderRepository,
    get_reminder_repository,
)
from helperbuddy.features.users.directory import UserDirectory

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from helperbuddy.features.reminders.schemas import ReminderCreate, ReminderUpdate


class ReminderNotEditableError(Exception):
    """Raised when changing a reminder that already left ``pending``."""

    def __init__(self, reminder_id: UUID, status: ReminderStatus) -> None:
        self.reminder_id = reminder_id
        self.status = status
        super().__init__(f"Reminder {reminder_id} is {status.value} and can no longer be edited")


class InvalidRecurrenceError(ValueError):
    """Raised when a recurring reminder would be left without a usable pattern."""

    def __init__(self, pattern: str | None) -> None:
        self.pattern = pattern
        super().__init__("recurring_pattern is required when is_recurring is true")


def localize(value: datetime, tz: tzinfo) -> datetime:
    """Read a naive datetime as wall-clock time in ``tz``; aware values pass through."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=tz)
    return value


class ReminderService(BaseService):
    """Orchestrates reminder CRUD for a single owner at a time."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        tz: tzinfo = UTC,
        repository: ReminderRepository | None = None,
        directory: UserDirectory | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._tz = tz
        self._repository = repository or get_reminder_repository()
        self._directory = directory or UserDirectory(session)

    async def create_reminder(self, owner_id: UUID, payload: ReminderCreate) -> Reminder:
        """Create a pending reminder, filling missing recipients from the owner's profile."""
        recipient_email = str(payload.recipient_email) if payload.recipient_email else None
        recipient_phone = payload.recipient_phone or None
        if recipient_email is None or recipient_phone is None:
            contact = await self._directory.default_contact(owner_id)
            recipient_email = recipient_email or contact.email
            recipient_phone = recipient_phone or contact.phone

        reminder = Reminder(
            owner_id=owner_id,
            title=payload.title,
            message=payload.message,
            reminder_type=payload.reminder_type,
            scheduled_time=localize(payload.scheduled_time, self._tz),
            is_recurring=payload.is_recurring,
            recurring_pattern=payload.recurring_pattern.value if payload.recurring_pattern else None,
            status=ReminderStatus.PENDING,
            recipient_email=recipient_email,
            recipient_phone=recipient_phone,
        )
        created = await self._repository.create(self._session, reminder)

        # INFO level - business event (audit trail)
        self.logger.info(
            "Reminder created",
            extra={
                "reminder_id": str(created.id),
                "owner_id": str(owner_id),
                "title": payload.title[:50],
                "reminder_type": created.reminder_type.value,
                "is_recurring": created.is_recurring,
                "operation": "service.create_reminder",
            },
        )
        return created

    async def list_reminders(
        self,
        owner_id: UUID,
        *,
        status: ReminderStatus | None = None,
        reminder_type: ReminderType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Reminder]:
        reminders = await self._repository.list_for_owner(
            self._session,
            owner_id,
            status=status,
            reminder_type=reminder_type,
            limit=limit,
            offset=offset,
        )
        result = list(reminders)

        # DEBUG level - routine list operation
        self._lazy.debug(
            lambda: f"service.list_reminders(owner={owner_id}, limit={limit}, offset={offset}) -> {len(result)} items"
        )
        return result

    async def list_upcoming(
        self,
        owner_id: UUID,
        *,
        limit: int = 10,
        as_of: datetime | None = None,
    ) -> list[Reminder]:
        """Pending reminders from now on, soonest first."""
        now = as_of or datetime.now(self._tz)
        return list(await self._repository.find_upcoming(self._session, owner_id, as_of=now, limit=limit))

    async def get_reminder(self, owner_id: UUID, reminder_id: UUID) -> Reminder:
        """Fetch an owned reminder.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
        """
        reminder = await self._repository.get_for_owner(self._session, reminder_id, owner_id)

        # DEBUG level - routine get
        self._lazy.debug(
            lambda: f"service.get_reminder({reminder_id}) -> {'found' if reminder else 'not found'}"
        )
        if reminder is None:
            raise NotFoundError("Reminder", {"id": reminder_id})
        return reminder

    async def update_reminder(
        self,
        owner_id: UUID,
        reminder_id: UUID,
        payload: ReminderUpdate,
    ) -> Reminder:
        """Apply a partial update to a pending reminder.

        Raises:
            NotFoundError: If the reminder is not owned by ``owner_id``.
            ReminderNotEditableError: If it is already sent or failed.
            InvalidRecurrenceError: If the result is recurring without a pattern.
        """
        reminder = await self.get_reminder(owner_id, reminder_id)
        if not reminder.is_pending:
            raise ReminderNotEditableError(reminder.id, reminder.status)

        changes = payload.model_dump(exclude_unset=True)
        if "scheduled_time" in changes and changes["scheduled_time"] is not None:
            changes["scheduled_time"] = localize(changes["scheduled_time"], self._tz)
        if "recipient_email" in changes and changes["recipient_email"] is not None:
            changes["recipient_email"] = str(changes["recipient_email"])
        if isinstance(changes.get("recurring_pattern"), RecurrencePattern):
            changes["recurring_pattern"] = changes["recurring_pattern"].value
        if changes.get("is_recurring") is False:
            changes["recurring_pattern"] = None

        for field, value in changes.items():
            if value is None and field in {"title", "message", "reminder_type", "scheduled_time", "is_recurring"}:
                continue
            setattr(reminder, field, value)

        if reminder.is_recurring and reminder.recurrence is None:
            raise InvalidRecurrenceError(reminder.recurring_pattern)

        await self._repository.save(self._session, reminder)

        self.logger.info(
            "Reminder updated",
            extra={
                "reminder_id": str(reminder.id),
                "fields": sorted(changes),
                "operation": "service.update_reminder",
            },
        )
        return reminder

    async def delete_reminder(self, owner_id: UUID, reminder_id: UUID) -> None:
        """Delete an owned reminder in any status.

        Raises:
            NotFoundError: If the reminder is not owned by ``owner_id``.
        """
        reminder = await self.get_reminder(owner_id, reminder_id)
        await self._repository.delete(self._session, reminder)


__all__ = ["InvalidRecurrenceError", "ReminderNotEditableError", "ReminderService", "localize"]
