"""Background jobs run by the in-process scheduler.

The ``AsyncIOScheduler`` instance lives at ``helperbuddy.tasks.scheduler.scheduler``;
it is not re-exported here so that ``helperbuddy.tasks.scheduler`` stays the module.
"""

from __future__ import annotations

from .scheduler import (
    check_due_reminders,
    get_job_status,
    get_reminder_dispatcher,
    setup_scheduled_jobs,
    start_scheduler,
    stop_scheduler,
)

__all__ = [
    "check_due_reminders",
    "get_job_status",
    "get_reminder_dispatcher",
    "setup_scheduled_jobs",
    "start_scheduler",
    "stop_scheduler",
]
