"""APScheduler integration for the due-reminder sweep.

APScheduler runs in the API process and calls the ReminderDispatcher on a
fixed interval:

    AsyncIOScheduler (IntervalTrigger) -> check_due_reminders() -> ReminderDispatcher.run_sweep()

``max_instances=1`` and ``coalesce=True`` stop APScheduler from stacking
runs; the dispatcher's own lock covers sweeps started any other way (CLI).
"""
from __future__ import annotations

from datetime import timedelta
import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from helperbuddy.core.settings import (
    get_app_settings,
    get_email_settings,
    get_reminder_settings,
    get_sms_settings,
)
from helperbuddy.features.reminders.channels import build_email_sender, build_sms_sender
from helperbuddy.features.reminders.dispatcher import ReminderDispatcher
from helperbuddy.infra.database.session import AsyncSessionLocal

if TYPE_CHECKING:
    from helperbuddy.core.settings import ReminderSettings
    from helperbuddy.features.reminders.dispatcher import SweepReport

logger = logging.getLogger(__name__)

CHECK_REMINDERS_JOB_ID = "check_reminders"

_reminder_settings = get_reminder_settings()

# Initialize APScheduler (runs in same process as FastAPI)
scheduler = AsyncIOScheduler(
    timezone="UTC",
    job_defaults={
        "coalesce": True,  # Combine missed runs into one
        "max_instances": 1,  # Never overlap sweeps
        "misfire_grace_time": _reminder_settings.misfire_grace_seconds,
    },
)

_dispatcher: ReminderDispatcher | None = None


def build_reminder_dispatcher() -> ReminderDispatcher:
    """Wire a dispatcher from settings and the shared session factory."""
    app_settings = get_app_settings()
    reminder_settings = get_reminder_settings()
    tz = app_settings.tzinfo

    return ReminderDispatcher(
        AsyncSessionLocal,
        email_sender=build_email_sender(get_email_settings(), tz=tz),
        sms_sender=build_sms_sender(get_sms_settings()),
        tz=tz,
        window=timedelta(seconds=reminder_settings.due_window_seconds),
    )


def get_reminder_dispatcher() -> ReminderDispatcher:
    """Process-wide dispatcher, created on first use."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_reminder_dispatcher()
    return _dispatcher


# =============================================================================
# Scheduled Job Definitions
# =============================================================================


async def check_due_reminders() -> SweepReport | None:
    """Run one reminder sweep.

    Scheduled: every ``REMINDER_POLL_INTERVAL_SECONDS`` (60 by default).
    """
    return await get_reminder_dispatcher().run_sweep()


def setup_scheduled_jobs(settings: ReminderSettings | None = None) -> bool:
    """Register the sweep job with APScheduler.

    Returns:
        True if the job was registered, False when the scheduler is disabled.
    """
    settings = settings or get_reminder_settings()
    if not settings.scheduler_enabled:
        logger.info("Reminder scheduler disabled, not registering sweep job")
        return False

    scheduler.add_job(
        func=check_due_reminders,
        trigger=IntervalTrigger(seconds=settings.poll_interval_seconds),
        id=CHECK_REMINDERS_JOB_ID,
        name="Check due reminders",
        replace_existing=True,
    )
    logger.info(
        "Scheduled reminder sweep",
        extra={
            "job_id": CHECK_REMINDERS_JOB_ID,
            "interval_seconds": settings.poll_interval_seconds,
            "window_seconds": settings.due_window_seconds,
        },
    )
    return True


async def start_scheduler() -> None:
    """Start the APScheduler.

    Call during application startup after setup_scheduled_jobs().
    """
    if not scheduler.running:
        logger.info("Starting APScheduler")
        scheduler.start()
        logger.info(f"APScheduler started with {len(scheduler.get_jobs())} jobs")
    else:
        logger.warning("APScheduler is already running")


async def stop_scheduler() -> None:
    """Stop the APScheduler gracefully.

    Call during application shutdown.
    """
    if scheduler.running:
        logger.info("Stopping APScheduler")
        scheduler.shutdown(wait=True)
        logger.info("APScheduler stopped")
    else:
        logger.debug("APScheduler is not running")


def get_job_status() -> list[dict]:
    """Get status of all scheduled jobs."""
    jobs = []
    for job in scheduler.get_jobs():
        jobs.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat()
                if getattr(job, "next_run_time", None)
                else None,
                "trigger": str(job.trigger),
            }
        )
    return jobs


__all__ = [
    "CHECK_REMINDERS_JOB_ID",
    "build_reminder_dispatcher",
    "check_due_reminders",
    "get_job_status",
    "get_reminder_dispatcher",
    "scheduler",
    "setup_scheduled_jobs",
    "start_scheduler",
    "stop_scheduler",
]
