"""Repository for the reminders feature.

The dispatcher relies on two query shapes:

- ``find_due``: pending reminders whose scheduled_time lies in a closed
  window ``[window_start, window_end]``.
- ``find_by_status``: reminders in a given lifecycle state.

Everything else here serves the owner-scoped HTTP API.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from helperbuddy.core.database import BaseRepository, RepositoryError
from helperbuddy.features.reminders.models import Reminder, ReminderStatus, ReminderType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class ReminderRepository(BaseRepository[Reminder]):
    def __init__(self) -> None:
        super().__init__(Reminder)

    async def find_due(
        self,
        session: AsyncSession,
        *,
        window_start: datetime,
        window_end: datetime,
    ) -> Sequence[Reminder]:
        """Find pending reminders due inside ``[window_start, window_end]``.

        Both bounds are inclusive. Order is by scheduled_time for stable
        logs only; callers must not depend on it.

        Raises:
            RepositoryError: If the store cannot be queried.
        """
        stmt = (
            select(Reminder)
            .where(
                Reminder.status == ReminderStatus.PENDING,
                Reminder.scheduled_time >= window_start,
                Reminder.scheduled_time <= window_end,
            )
            .order_by(Reminder.scheduled_time.asc())
        )
        try:
            result = await session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryError(
                "Due reminder query failed",
                details={
                    "window_start": window_start.isoformat(),
                    "window_end": window_end.isoformat(),
                    "error": str(e),
                },
            ) from e
        items = result.scalars().all()

        if items:
            self._logger.info(
                "Found due reminders",
                extra={
                    "count": len(items),
                    "window_start": window_start.isoformat(),
                    "window_end": window_end.isoformat(),
                    "operation": "db.find_due",
                },
            )
        else:
            self._lazy.debug(lambda: f"db.find_due: nothing due in [{window_start}, {window_end}]")
        return items

    async def find_by_status(
        self,
        session: AsyncSession,
        status: ReminderStatus,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Reminder]:
        """Find reminders in ``status``, oldest scheduled first."""
        stmt = (
            select(Reminder)
            .where(Reminder.status == status)
            .order_by(Reminder.scheduled_time.asc())
            .limit(limit)
            .offset(offset)
        )
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(lambda: f"db.find_by_status: Reminder(status={status.value}) -> {len(items)} items")
        return items

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner_id: UUID,
        *,
        status: ReminderStatus | None = None,
        reminder_type: ReminderType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Reminder]:
        """An owner's reminders, earliest scheduled first, optionally filtered."""
        stmt = select(Reminder).where(Reminder.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(Reminder.status == status)
        if reminder_type is not None:
            stmt = stmt.where(Reminder.reminder_type == reminder_type)
        stmt = stmt.order_by(Reminder.scheduled_time.asc()).limit(limit).offset(offset)

        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_for_owner: Reminder(owner={owner_id}, status={status}, type={reminder_type}) -> {len(items)} items"
        )
        return items

    async def get_for_owner(
        self,
        session: AsyncSession,
        reminder_id: UUID,
        owner_id: UUID,
    ) -> Reminder | None:
        """Get a reminder only if ``owner_id`` owns it."""
        stmt = select(Reminder).where(
            Reminder.id == reminder_id,
            Reminder.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_upcoming(
        self,
        session: AsyncSession,
        owner_id: UUID,
        *,
        as_of: datetime | None = None,
        limit: int = 10,
    ) -> Sequence[Reminder]:
        """Pending reminders scheduled at or after ``as_of`` (defaults to now)."""
        now = as_of or datetime.now(UTC)
        stmt = (
            select(Reminder)
            .where(
                Reminder.owner_id == owner_id,
                Reminder.status == ReminderStatus.PENDING,
                Reminder.scheduled_time >= now,
            )
            .order_by(Reminder.scheduled_time.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(lambda: f"db.find_upcoming: owner={owner_id} as_of={now} -> {len(items)} items")
        return items


_reminder_repository: ReminderRepository | None = None


def get_reminder_repository() -> ReminderRepository:
    """Process-wide repository; also usable as a FastAPI dependency."""
    global _reminder_repository
    if _reminder_repository is None:
        _reminder_repository = ReminderRepository()
    return _reminder_repository


__all__ = ["ReminderRepository", "get_reminder_repository"]
