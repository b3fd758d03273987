"""FastAPI dependencies for the reminders feature.

Example usage:
    from helperbuddy.features.reminders.dependencies import ReminderServiceDep, SessionDep

    @router.get("/reminders")
    async def list_reminders(user: CurrentUser, service: ReminderServiceDep):
        return await service.list_reminders(user.id)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from helperbuddy.core.dependencies.database import get_db_session
from helperbuddy.core.settings import AppSettings, ReminderSettings, get_app_settings, get_reminder_settings
from helperbuddy.features.reminders.repository import ReminderRepository, get_reminder_repository
from helperbuddy.features.reminders.service import ReminderService

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
ReminderSettingsDep = Annotated[ReminderSettings, Depends(get_reminder_settings)]


def get_reminder_service(
    session: SessionDep,
    app_settings: Annotated[AppSettings, Depends(get_app_settings)],
    repository: Annotated[ReminderRepository, Depends(get_reminder_repository)],
) -> ReminderService:
    """Build a request-scoped ReminderService bound to the operating timezone."""
    return ReminderService(session, tz=app_settings.tzinfo, repository=repository)


ReminderServiceDep = Annotated[ReminderService, Depends(get_reminder_service)]

__all__ = [
    "ReminderServiceDep",
    "ReminderSettingsDep",
    "SessionDep",
    "get_reminder_service",
]
