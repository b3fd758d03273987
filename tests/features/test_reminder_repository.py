"""Integration-style tests for the reminder repository queries."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock
import uuid

import pytest
from sqlalchemy.exc import OperationalError

from helperbuddy.core.database import RepositoryError
from helperbuddy.features.reminders.models import ReminderStatus, ReminderType
from helperbuddy.features.reminders.repository import ReminderRepository, get_reminder_repository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

NOW = datetime(2026, 10, 19, 4, 0, tzinfo=UTC)
WINDOW = timedelta(seconds=60)


@pytest.mark.asyncio
async def test_find_due_includes_both_window_bounds(db_session: AsyncSession, make_reminder) -> None:
    repo = ReminderRepository()
    at_start = await make_reminder(title="start", scheduled_time=NOW - WINDOW)
    at_end = await make_reminder(title="end", scheduled_time=NOW)

    due = await repo.find_due(db_session, window_start=NOW - WINDOW, window_end=NOW)

    assert [r.id for r in due] == [at_start.id, at_end.id]


@pytest.mark.asyncio
async def test_find_due_excludes_outside_window(db_session: AsyncSession, make_reminder) -> None:
    repo = ReminderRepository()
    await make_reminder(title="too old", scheduled_time=NOW - WINDOW - timedelta(seconds=1))
    await make_reminder(title="future", scheduled_time=NOW + timedelta(seconds=1))
    inside = await make_reminder(title="inside", scheduled_time=NOW - timedelta(seconds=30))

    due = await repo.find_due(db_session, window_start=NOW - WINDOW, window_end=NOW)

    assert [r.id for r in due] == [inside.id]


@pytest.mark.asyncio
async def test_find_due_only_returns_pending(db_session: AsyncSession, make_reminder) -> None:
    repo = ReminderRepository()
    pending = await make_reminder(title="pending", scheduled_time=NOW)
    await make_reminder(title="sent", scheduled_time=NOW, status=ReminderStatus.SENT, sent_at=NOW)
    await make_reminder(title="failed", scheduled_time=NOW, status=ReminderStatus.FAILED)

    due = await repo.find_due(db_session, window_start=NOW - WINDOW, window_end=NOW)

    assert [r.id for r in due] == [pending.id]


@pytest.mark.asyncio
async def test_find_due_orders_by_scheduled_time(db_session: AsyncSession, make_reminder) -> None:
    repo = ReminderRepository()
    later = await make_reminder(title="later", scheduled_time=NOW - timedelta(seconds=5))
    earlier = await make_reminder(title="earlier", scheduled_time=NOW - timedelta(seconds=50))

    due = await repo.find_due(db_session, window_start=NOW - WINDOW, window_end=NOW)

    assert [r.id for r in due] == [earlier.id, later.id]


@pytest.mark.asyncio
async def test_find_due_compares_instants_across_offsets(db_session: AsyncSession, make_reminder) -> None:
    from zoneinfo import ZoneInfo

    repo = ReminderRepository()
    ist = ZoneInfo("Asia/Kolkata")
    # 09:30 IST == 04:00 UTC
    reminder = await make_reminder(scheduled_time=datetime(2026, 10, 19, 9, 30, tzinfo=ist))

    due = await repo.find_due(
        db_session,
        window_start=(NOW - WINDOW).astimezone(ist),
        window_end=NOW.astimezone(ist),
    )

    assert [r.id for r in due] == [reminder.id]
    assert due[0].scheduled_time == NOW


@pytest.mark.asyncio
async def test_find_due_wraps_driver_errors() -> None:
    repo = ReminderRepository()
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

    with pytest.raises(RepositoryError) as exc_info:
        await repo.find_due(session, window_start=NOW - WINDOW, window_end=NOW)

    assert "Due reminder query failed" in str(exc_info.value)


@pytest.mark.asyncio
async def test_find_by_status(db_session: AsyncSession, make_reminder) -> None:
    repo = ReminderRepository()
    await make_reminder(title="pending")
    failed = await make_reminder(title="failed", status=ReminderStatus.FAILED)

    result = await repo.find_by_status(db_session, ReminderStatus.FAILED)

    assert [r.id for r in result] == [failed.id]


@pytest.mark.asyncio
async def test_list_for_owner_filters(db_session: AsyncSession, make_reminder, other_user) -> None:
    repo = ReminderRepository()
    email = await make_reminder(title="email", scheduled_time=NOW)
    sms = await make_reminder(title="sms", reminder_type=ReminderType.SMS, scheduled_time=NOW + WINDOW)
    await make_reminder(title="not mine", owner_id=other_user.id)

    everything = await repo.list_for_owner(db_session, email.owner_id)
    only_sms = await repo.list_for_owner(db_session, email.owner_id, reminder_type=ReminderType.SMS)

    assert [r.id for r in everything] == [email.id, sms.id]
    assert [r.id for r in only_sms] == [sms.id]


@pytest.mark.asyncio
async def test_get_for_owner_hides_foreign_reminders(
    db_session: AsyncSession,
    make_reminder,
    other_user,
) -> None:
    repo = ReminderRepository()
    reminder = await make_reminder()

    assert (await repo.get_for_owner(db_session, reminder.id, reminder.owner_id)).id == reminder.id
    assert await repo.get_for_owner(db_session, reminder.id, other_user.id) is None
    assert await repo.get_for_owner(db_session, uuid.uuid4(), reminder.owner_id) is None


@pytest.mark.asyncio
async def test_find_upcoming(db_session: AsyncSession, make_reminder) -> None:
    repo = ReminderRepository()
    await make_reminder(title="past", scheduled_time=NOW - timedelta(hours=1))
    second = await make_reminder(title="second", scheduled_time=NOW + timedelta(days=2))
    first = await make_reminder(title="first", scheduled_time=NOW + timedelta(hours=1))
    await make_reminder(title="sent", scheduled_time=NOW + timedelta(hours=2), status=ReminderStatus.SENT)

    upcoming = await repo.find_upcoming(db_session, first.owner_id, as_of=NOW, limit=10)
    limited = await repo.find_upcoming(db_session, first.owner_id, as_of=NOW, limit=1)

    assert [r.id for r in upcoming] == [first.id, second.id]
    assert [r.id for r in limited] == [first.id]


def test_get_reminder_repository_is_singleton() -> None:
    assert get_reminder_repository() is get_reminder_repository()
