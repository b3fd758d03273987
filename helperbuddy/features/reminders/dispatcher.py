"""Reminder dispatcher: one due-reminder sweep per call.

A sweep:

1. Takes ``now`` in the deployment timezone and a window of
   ``[now - window, now]``.
2. Loads pending reminders scheduled inside the window. If that query fails
   the sweep is aborted; the next tick starts over.
3. For each due reminder, calls the email and/or SMS sender (concurrently
   for ``both``), then writes the outcome in its own transaction:
   ``sent`` + ``sent_at`` if any channel succeeded, ``failed`` otherwise,
   plus a new pending row for the next occurrence of a delivered
   recurring reminder.

A failure while handling one reminder is logged and counted; the rest of
the sweep continues. Reminders that slipped out of the window before a
sweep saw them are not fired retroactively.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
import time
from typing import TYPE_CHECKING
import uuid

from sqlalchemy.exc import SQLAlchemyError

from helperbuddy.core.database import RepositoryError
from helperbuddy.core.services.base import BaseService
from helperbuddy.features.reminders.metrics import (
    reminder_channel_deliveries_total,
    reminder_continuations_total,
    reminder_dispatch_errors_total,
    reminder_sweep_duration_seconds,
    reminder_sweeps_total,
    reminders_dispatched_total,
)
from helperbuddy.features.reminders.models import Reminder, ReminderStatus
from helperbuddy.features.reminders.recurrence import next_occurrence
from helperbuddy.features.reminders.repository import ReminderRepository, get_reminder_repository
from helperbuddy.infra.logging import log_context

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from helperbuddy.features.reminders.channels.base import (
        ReminderEmailSender,
        ReminderSmsSender,
    )

DEFAULT_WINDOW = timedelta(seconds=60)


@dataclass(slots=True)
class SweepReport:
    """Summary of one sweep.

    Attributes:
        sweep_id: Correlation id, also bound to the log context
        window_start: Inclusive lower bound of the due window
        window_end: Inclusive upper bound (the sweep's ``now``)
        due: Reminders returned by the due query
        sent: Reminders marked sent
        failed: Reminders marked failed
        errors: Reminders whose handling raised; left as they were
        continuations: Next-occurrence rows inserted
        aborted: True when the due query failed
    """

    sweep_id: str
    window_start: datetime
    window_end: datetime
    due: int = 0
    sent: int = 0
    failed: int = 0
    errors: int = 0
    continuations: int = 0
    aborted: bool = False


class ReminderDispatcher(BaseService):
    """Scan for due reminders and deliver them.

    Collaborators are injected: a session factory for the store, the two
    channel senders and a clock. The dispatcher holds no other state apart
    from the lock that keeps sweeps from overlapping.

    Example:
        dispatcher = ReminderDispatcher(
            AsyncSessionLocal,
            email_sender=build_email_sender(get_email_settings()),
            sms_sender=build_sms_sender(get_sms_settings()),
            tz=ZoneInfo("Asia/Kolkata"),
        )
        report = await dispatcher.run_sweep()
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        email_sender: ReminderEmailSender,
        sms_sender: ReminderSmsSender,
        tz: tzinfo,
        repository: ReminderRepository | None = None,
        window: timedelta = DEFAULT_WINDOW,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__()
        self._session_factory = session_factory
        self._email_sender = email_sender
        self._sms_sender = sms_sender
        self._tz = tz
        self._repository = repository or get_reminder_repository()
        self._window = window
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run_sweep(self) -> SweepReport | None:
        """Run one sweep unless the previous one is still in progress.

        Returns:
            The sweep report, or None when the tick was skipped.
        """
        if self._lock.locked():
            reminder_sweeps_total.labels(outcome="skipped").inc()
            self.logger.warning(
                "Previous reminder sweep still running, skipping tick",
                extra={"operation": "dispatcher.run_sweep"},
            )
            return None

        async with self._lock:
            return await self._sweep()

    async def _sweep(self) -> SweepReport:
        now = self._clock()
        report = SweepReport(
            sweep_id=uuid.uuid4().hex,
            window_start=now - self._window,
            window_end=now,
        )
        start_time = time.perf_counter()

        with log_context(sweep_id=report.sweep_id):
            try:
                async with self._session_factory() as session:
                    due = await self._repository.find_due(
                        session,
                        window_start=report.window_start,
                        window_end=report.window_end,
                    )
            except (RepositoryError, SQLAlchemyError):
                report.aborted = True
                reminder_sweeps_total.labels(outcome="aborted").inc()
                self.logger.exception(
                    "Reminder sweep aborted: due query failed",
                    extra={"operation": "dispatcher.sweep"},
                )
                return report

            report.due = len(due)
            for reminder in due:
                with log_context(reminder_id=str(reminder.id)):
                    await self._process(reminder, now, report)

            duration = time.perf_counter() - start_time
            reminder_sweep_duration_seconds.observe(duration)
            reminder_sweeps_total.labels(outcome="completed").inc()

            if report.due:
                self.logger.info(
                    "Reminder sweep completed",
                    extra={
                        "due": report.due,
                        "sent": report.sent,
                        "failed": report.failed,
                        "errors": report.errors,
                        "continuations": report.continuations,
                        "duration_ms": int(duration * 1000),
                        "operation": "dispatcher.sweep",
                    },
                )
            else:
                self._lazy.debug(
                    lambda: f"dispatcher.sweep: nothing due in [{report.window_start}, {report.window_end}]"
                )
        return report

    async def _process(self, reminder: Reminder, now: datetime, report: SweepReport) -> None:
        """Deliver one reminder and record the outcome. Never raises."""
        try:
            delivered = await self._deliver(reminder)
            applied, continuation_id = await self._persist_outcome(
                reminder.id, reminder.scheduled_time, delivered, now
            )
        except Exception:
            report.errors += 1
            reminder_dispatch_errors_total.inc()
            self.logger.exception(
                "Failed to dispatch reminder",
                extra={"reminder_id": str(reminder.id), "operation": "dispatcher.process"},
            )
            return

        if not applied:
            return

        status = ReminderStatus.SENT if delivered else ReminderStatus.FAILED
        reminders_dispatched_total.labels(status=status.value).inc()
        if delivered:
            report.sent += 1
        else:
            report.failed += 1
        if continuation_id is not None:
            report.continuations += 1
            reminder_continuations_total.inc()

        self.logger.info(
            "Reminder dispatched",
            extra={
                "reminder_id": str(reminder.id),
                "status": status.value,
                "reminder_type": reminder.reminder_type.value,
                "continuation_id": str(continuation_id) if continuation_id else None,
                "operation": "dispatcher.process",
            },
        )

    async def _deliver(self, reminder: Reminder) -> bool:
        """Fire every channel the reminder asks for.

        All calls complete before this returns, so no status is written while
        a channel is still in flight.
        """
        calls: list[Awaitable[bool]] = []
        if reminder.reminder_type.uses_email:
            calls.append(
                self._attempt(
                    "email",
                    self._email_sender.send_reminder(
                        reminder.recipient_email,
                        reminder.title,
                        reminder.message,
                        reminder.scheduled_time,
                    ),
                )
            )
        if reminder.reminder_type.uses_sms:
            calls.append(
                self._attempt(
                    "sms",
                    self._sms_sender.send_reminder(
                        reminder.recipient_phone,
                        reminder.title,
                        reminder.message,
                    ),
                )
            )

        outcomes = await asyncio.gather(*calls)
        return any(outcomes)

    async def _attempt(self, channel: str, call: Awaitable[bool]) -> bool:
        try:
            ok = bool(await call)
        except Exception:
            ok = False
            self.logger.exception(
                "Channel sender raised",
                extra={"channel": channel, "operation": "dispatcher.attempt"},
            )
        reminder_channel_deliveries_total.labels(
            channel=channel,
            outcome="success" if ok else "failure",
        ).inc()
        return ok

    async def _persist_outcome(
        self,
        reminder_id: UUID,
        scheduled_time: datetime,
        delivered: bool,
        now: datetime,
    ) -> tuple[bool, UUID | None]:
        """Write status and any continuation in a single transaction.

        The row is re-read first and left alone unless it is still pending at
        the scheduled_time that was delivered. A reminder rescheduled during
        the sweep therefore stays pending for its new time; title or message
        edits are not checked.

        Returns:
            (applied, continuation_id)
        """
        async with self._session_factory() as session:
            try:
                record = await self._repository.get(session, reminder_id)
                if (
                    record is None
                    or not record.is_pending
                    or record.scheduled_time != scheduled_time
                ):
                    self.logger.info(
                        "Reminder changed during sweep, outcome not recorded",
                        extra={"reminder_id": str(reminder_id), "operation": "dispatcher.persist"},
                    )
                    return False, None

                if delivered:
                    record.status = ReminderStatus.SENT
                    record.sent_at = now
                else:
                    record.status = ReminderStatus.FAILED
                await self._repository.save(session, record)

                continuation_id = None
                if delivered and record.is_recurring:
                    continuation_id = await self._schedule_next(session, record)

                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return True, continuation_id

    async def _schedule_next(self, session: AsyncSession, record: Reminder) -> UUID | None:
        pattern = record.recurrence
        next_time = (
            next_occurrence(record.scheduled_time, pattern, tz=self._tz) if pattern is not None else None
        )
        if next_time is None:
            self.logger.info(
                "No next occurrence for recurring reminder",
                extra={
                    "reminder_id": str(record.id),
                    "recurring_pattern": record.recurring_pattern,
                    "operation": "dispatcher.schedule_next",
                },
            )
            return None

        continuation = await self._repository.create(session, record.spawn_next(next_time))
        self._lazy.debug(
            lambda: f"dispatcher.schedule_next: {record.id} -> {continuation.id} at {next_time.isoformat()}"
        )
        return continuation.id


__all__ = ["DEFAULT_WINDOW", "ReminderDispatcher", "SweepReport"]
