"""Reminder commands: run a sweep by hand, inspect reminders by status."""

import sys

import click

from helperbuddy.cli.utils import coro, error, header, info, success, warning
from helperbuddy.features.reminders.models import ReminderStatus


@click.group(name="reminders")
def reminders() -> None:
    """Reminder dispatch commands."""


@reminders.command(name="sweep")
@coro
async def sweep() -> None:
    """Run one due-reminder sweep now.

    Uses the same dispatcher and settings as the scheduled job. Safe to run
    next to a live server only for a single-instance deployment.
    """
    from helperbuddy.infra.database.session import close_database
    from helperbuddy.tasks.scheduler import build_reminder_dispatcher

    dispatcher = build_reminder_dispatcher()
    try:
        report = await dispatcher.run_sweep()
    finally:
        await close_database()

    if report is None:
        warning("A sweep is already running")
        return
    if report.aborted:
        error("Sweep aborted: due query failed (see logs)")
        sys.exit(1)

    info(f"Window: {report.window_start.isoformat()} .. {report.window_end.isoformat()}")
    success(
        f"Due {report.due}: sent {report.sent}, failed {report.failed}, "
        f"errors {report.errors}, continuations {report.continuations}"
    )


@reminders.command(name="list")
@click.option(
    "--status",
    "status_value",
    type=click.Choice([s.value for s in ReminderStatus]),
    default=ReminderStatus.PENDING.value,
    show_default=True,
)
@click.option("--limit", default=50, show_default=True, type=int)
@coro
async def list_reminders(status_value: str, limit: int) -> None:
    """List reminders in a given status across all owners."""
    from helperbuddy.core.settings import get_app_settings
    from helperbuddy.features.reminders.repository import get_reminder_repository
    from helperbuddy.infra.database.session import close_database, get_async_session

    tz = get_app_settings().tzinfo
    status = ReminderStatus(status_value)
    try:
        async with get_async_session() as session:
            items = await get_reminder_repository().find_by_status(session, status, limit=limit)
    finally:
        await close_database()

    header(f"{status.value.capitalize()} reminders")
    if not items:
        info("None")
        return
    for reminder in items:
        local_time = reminder.scheduled_time.astimezone(tz).strftime("%Y-%m-%d %H:%M %Z")
        pattern = reminder.recurring_pattern if reminder.is_recurring else "-"
        click.echo(
            f"{reminder.id}  {local_time:<22} {reminder.reminder_type.value:<5} {pattern:<8} {reminder.title}"
        )
    success(f"Total: {len(items)}")
