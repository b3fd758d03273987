"""Tests for the due-reminder sweep."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import select

from helperbuddy.core.database import RepositoryError
from helperbuddy.features.reminders.dispatcher import ReminderDispatcher
from helperbuddy.features.reminders.models import Reminder, ReminderStatus, ReminderType
from helperbuddy.features.reminders.repository import ReminderRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

IST = ZoneInfo("Asia/Kolkata")
NOW = datetime(2026, 10, 19, 9, 30, tzinfo=IST)


def _dispatcher(session_factory, email_sender, sms_sender, **kwargs) -> ReminderDispatcher:
    kwargs.setdefault("clock", lambda: NOW)
    return ReminderDispatcher(
        session_factory,
        email_sender=email_sender,
        sms_sender=sms_sender,
        tz=IST,
        **kwargs,
    )


async def _reload(session_factory: async_sessionmaker[AsyncSession], reminder_id) -> Reminder:
    async with session_factory() as session:
        return await session.get(Reminder, reminder_id)


async def _all(session_factory: async_sessionmaker[AsyncSession]) -> list[Reminder]:
    async with session_factory() as session:
        result = await session.execute(select(Reminder).order_by(Reminder.scheduled_time))
        return list(result.scalars().all())


@pytest.mark.unit
class TestDispatchOutcomes:
    """Status transitions for single reminders."""

    @pytest.mark.asyncio
    async def test_email_success_marks_sent(self, session_factory, make_reminder, email_sender, sms_sender):
        reminder = await make_reminder(scheduled_time=NOW - timedelta(seconds=10))

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        stored = await _reload(session_factory, reminder.id)
        assert stored.status == ReminderStatus.SENT
        assert stored.sent_at == NOW.astimezone(UTC)
        assert report.due == 1
        assert report.sent == 1
        assert len(email_sender.calls) == 1
        assert email_sender.calls[0]["recipient"] == "asha@example.com"
        assert email_sender.calls[0]["title"] == "Pay rent"
        assert sms_sender.calls == []

    @pytest.mark.asyncio
    async def test_sms_failure_marks_failed(self, session_factory, make_reminder, email_sender, sms_sender):
        sms_sender.result = False
        reminder = await make_reminder(reminder_type=ReminderType.SMS, scheduled_time=NOW)

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        stored = await _reload(session_factory, reminder.id)
        assert stored.status == ReminderStatus.FAILED
        assert stored.sent_at is None
        assert report.failed == 1
        assert sms_sender.calls[0]["recipient"] == "+919800000001"
        assert email_sender.calls == []

    @pytest.mark.asyncio
    async def test_both_channels_sent_when_only_email_succeeds(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        sms_sender.result = False
        reminder = await make_reminder(reminder_type=ReminderType.BOTH, scheduled_time=NOW)

        await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        stored = await _reload(session_factory, reminder.id)
        assert stored.status == ReminderStatus.SENT
        assert len(email_sender.calls) == 1
        assert len(sms_sender.calls) == 1

    @pytest.mark.asyncio
    async def test_both_channels_failed_when_all_fail(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        email_sender.result = False
        sms_sender.result = False
        reminder = await make_reminder(reminder_type=ReminderType.BOTH, scheduled_time=NOW)

        await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert (await _reload(session_factory, reminder.id)).status == ReminderStatus.FAILED

    @pytest.mark.asyncio
    async def test_raising_sender_counts_as_failure(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        email_sender.error = ConnectionError("smtp down")
        reminder = await make_reminder(scheduled_time=NOW)

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert (await _reload(session_factory, reminder.id)).status == ReminderStatus.FAILED
        assert report.failed == 1
        assert report.errors == 0

    @pytest.mark.asyncio
    async def test_missing_recipient_is_passed_to_sender(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        email_sender.result = False
        await make_reminder(scheduled_time=NOW, recipient_email=None)

        await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert email_sender.calls[0]["recipient"] is None


@pytest.mark.unit
class TestDueWindow:
    """Which reminders a sweep picks up."""

    @pytest.mark.asyncio
    async def test_outside_window_is_left_pending(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        too_old = await make_reminder(title="old", scheduled_time=NOW - timedelta(minutes=5))
        future = await make_reminder(title="future", scheduled_time=NOW + timedelta(minutes=5))

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.due == 0
        assert email_sender.calls == []
        assert (await _reload(session_factory, too_old.id)).status == ReminderStatus.PENDING
        assert (await _reload(session_factory, future.id)).status == ReminderStatus.PENDING

    @pytest.mark.asyncio
    async def test_window_is_configurable(self, session_factory, make_reminder, email_sender, sms_sender):
        reminder = await make_reminder(scheduled_time=NOW - timedelta(minutes=5))
        dispatcher = _dispatcher(session_factory, email_sender, sms_sender, window=timedelta(minutes=10))

        report = await dispatcher.run_sweep()

        assert report.window_start == NOW - timedelta(minutes=10)
        assert report.window_end == NOW
        assert (await _reload(session_factory, reminder.id)).status == ReminderStatus.SENT

    @pytest.mark.asyncio
    async def test_second_sweep_does_not_redeliver(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        await make_reminder(scheduled_time=NOW)
        dispatcher = _dispatcher(session_factory, email_sender, sms_sender)

        await dispatcher.run_sweep()
        second = await dispatcher.run_sweep()

        assert second.due == 0
        assert len(email_sender.calls) == 1

    @pytest.mark.asyncio
    async def test_failed_reminder_is_not_retried(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        email_sender.result = False
        await make_reminder(scheduled_time=NOW)
        dispatcher = _dispatcher(session_factory, email_sender, sms_sender)

        await dispatcher.run_sweep()
        email_sender.result = True
        second = await dispatcher.run_sweep()

        assert second.due == 0
        assert len(email_sender.calls) == 1


@pytest.mark.unit
class TestRecurringContinuation:
    """Next-occurrence rows created on delivery."""

    @pytest.mark.asyncio
    async def test_monthly_delivery_creates_next_occurrence(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        # 2026-01-31 09:30 IST, dispatched on time
        scheduled = datetime(2026, 1, 31, 9, 30, tzinfo=IST)
        reminder = await make_reminder(
            scheduled_time=scheduled,
            is_recurring=True,
            recurring_pattern="monthly",
            reminder_type=ReminderType.BOTH,
        )
        dispatcher = _dispatcher(session_factory, email_sender, sms_sender, clock=lambda: scheduled)

        report = await dispatcher.run_sweep()

        rows = await _all(session_factory)
        assert report.continuations == 1
        assert len(rows) == 2
        original, continuation = rows
        assert original.id == reminder.id
        assert original.status == ReminderStatus.SENT
        assert continuation.status == ReminderStatus.PENDING
        assert continuation.scheduled_time == datetime(2026, 2, 28, 9, 30, tzinfo=IST).astimezone(UTC)
        assert continuation.is_recurring is True
        assert continuation.recurring_pattern == "monthly"
        assert continuation.reminder_type == ReminderType.BOTH
        assert continuation.owner_id == reminder.owner_id
        assert continuation.title == reminder.title
        assert continuation.message == reminder.message
        assert continuation.recipient_email == reminder.recipient_email
        assert continuation.recipient_phone == reminder.recipient_phone
        assert continuation.sent_at is None

    @pytest.mark.asyncio
    async def test_continuation_fires_on_its_own_sweep(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        scheduled = datetime(2026, 10, 19, 9, 30, tzinfo=IST)
        await make_reminder(scheduled_time=scheduled, is_recurring=True, recurring_pattern="daily")

        await _dispatcher(session_factory, email_sender, sms_sender, clock=lambda: scheduled).run_sweep()
        next_day = scheduled + timedelta(days=1)
        report = await _dispatcher(
            session_factory, email_sender, sms_sender, clock=lambda: next_day
        ).run_sweep()

        assert report.sent == 1
        assert report.continuations == 1
        assert len(await _all(session_factory)) == 3
        assert len(email_sender.calls) == 2

    @pytest.mark.asyncio
    async def test_failed_recurring_reminder_has_no_continuation(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        email_sender.result = False
        await make_reminder(scheduled_time=NOW, is_recurring=True, recurring_pattern="weekly")

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.continuations == 0
        assert len(await _all(session_factory)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pattern", ["none", "hourly", None])
    async def test_unusable_pattern_has_no_continuation(
        self, session_factory, make_reminder, email_sender, sms_sender, pattern
    ):
        reminder = await make_reminder(scheduled_time=NOW, is_recurring=True, recurring_pattern=pattern)

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.continuations == 0
        assert (await _reload(session_factory, reminder.id)).status == ReminderStatus.SENT
        assert len(await _all(session_factory)) == 1

    @pytest.mark.asyncio
    async def test_non_recurring_pattern_is_ignored(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        await make_reminder(scheduled_time=NOW, is_recurring=False, recurring_pattern="daily")

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.continuations == 0
        assert len(await _all(session_factory)) == 1


@pytest.mark.unit
class TestSweepResilience:
    """Failures that must not take the sweep down."""

    @pytest.mark.asyncio
    async def test_due_query_failure_aborts_sweep(self, session_factory, email_sender, sms_sender):
        repository = ReminderRepository()
        repository.find_due = AsyncMock(side_effect=RepositoryError("Due reminder query failed"))

        report = await _dispatcher(
            session_factory, email_sender, sms_sender, repository=repository
        ).run_sweep()

        assert report.aborted is True
        assert report.due == 0
        assert email_sender.calls == []

    @pytest.mark.asyncio
    async def test_persist_failure_is_isolated_to_one_reminder(
        self, session_factory, make_reminder, email_sender, sms_sender
    ):
        first = await make_reminder(title="first", scheduled_time=NOW - timedelta(seconds=20))
        second = await make_reminder(title="second", scheduled_time=NOW - timedelta(seconds=10))

        repository = ReminderRepository()
        original_save = repository.save

        async def flaky_save(session, instance):
            if instance.id == first.id:
                raise RuntimeError("disk full")
            return await original_save(session, instance)

        repository.save = flaky_save

        report = await _dispatcher(
            session_factory, email_sender, sms_sender, repository=repository
        ).run_sweep()

        assert report.errors == 1
        assert report.sent == 1
        assert (await _reload(session_factory, first.id)).status == ReminderStatus.PENDING
        assert (await _reload(session_factory, second.id)).status == ReminderStatus.SENT

    @pytest.mark.asyncio
    async def test_reminder_deleted_mid_sweep_is_skipped(
        self, session_factory, make_reminder, email_sender, sms_sender, db_session
    ):
        reminder = await make_reminder(scheduled_time=NOW)

        async def delete_then_succeed(recipient, title, message, scheduled_time):
            stored = await db_session.get(Reminder, reminder.id)
            await db_session.delete(stored)
            await db_session.commit()
            return True

        email_sender.send_reminder = delete_then_succeed

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.due == 1
        assert report.sent == 0
        assert report.errors == 0
        assert await _all(session_factory) == []

    @pytest.mark.asyncio
    async def test_reminder_rescheduled_mid_sweep_stays_pending(
        self, session_factory, make_reminder, email_sender, sms_sender, db_session
    ):
        reminder = await make_reminder(
            scheduled_time=NOW, is_recurring=True, recurring_pattern="daily"
        )
        moved_to = NOW + timedelta(hours=2)

        async def reschedule_then_succeed(recipient, title, message, scheduled_time):
            stored = await db_session.get(Reminder, reminder.id)
            stored.scheduled_time = moved_to
            await db_session.commit()
            return True

        email_sender.send_reminder = reschedule_then_succeed

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.due == 1
        assert report.sent == 0
        assert report.continuations == 0
        stored = await _reload(session_factory, reminder.id)
        assert stored.status == ReminderStatus.PENDING
        assert stored.sent_at is None
        assert stored.scheduled_time == moved_to
        assert len(await _all(session_factory)) == 1

    @pytest.mark.asyncio
    async def test_reminder_retitled_mid_sweep_is_recorded_as_sent(
        self, session_factory, make_reminder, email_sender, sms_sender, db_session
    ):
        reminder = await make_reminder(title="Pay rent", scheduled_time=NOW)

        async def retitle_then_succeed(recipient, title, message, scheduled_time):
            stored = await db_session.get(Reminder, reminder.id)
            stored.title = "Pay rent and water bill"
            await db_session.commit()
            return True

        email_sender.send_reminder = retitle_then_succeed

        report = await _dispatcher(session_factory, email_sender, sms_sender).run_sweep()

        assert report.sent == 1
        stored = await _reload(session_factory, reminder.id)
        assert stored.status == ReminderStatus.SENT
        assert stored.sent_at == NOW

    @pytest.mark.asyncio
    async def test_overlapping_sweep_is_skipped(self, session_factory, make_reminder, sms_sender):
        await make_reminder(scheduled_time=NOW)
        release = asyncio.Event()
        entered = asyncio.Event()

        class SlowEmailSender:
            calls = 0

            async def send_reminder(self, recipient, title, message, scheduled_time):
                SlowEmailSender.calls += 1
                entered.set()
                await release.wait()
                return True

        dispatcher = _dispatcher(session_factory, SlowEmailSender(), sms_sender)

        first = asyncio.create_task(dispatcher.run_sweep())
        await entered.wait()
        assert dispatcher.is_running is True

        skipped = await dispatcher.run_sweep()
        release.set()
        report = await first

        assert skipped is None
        assert report.sent == 1
        assert SlowEmailSender.calls == 1
        assert dispatcher.is_running is False
