"""API router for the reminders feature.

Every endpoint is scoped to the authenticated owner; reminders belonging to
someone else are reported as not found.
"""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from helperbuddy.core.dependencies.auth import CurrentUser
from helperbuddy.features.reminders.dependencies import (
    ReminderServiceDep,
    ReminderSettingsDep,
    SessionDep,
)
from helperbuddy.features.reminders.models import ReminderStatus, ReminderType
from helperbuddy.features.reminders.schemas import (
    ReminderCreate,
    ReminderResponse,
    ReminderUpdate,
)
from helperbuddy.features.reminders.service import (
    InvalidRecurrenceError,
    ReminderNotEditableError,
)
from helperbuddy.infra.logging import get_lazy_logger

router = APIRouter(prefix="/reminders", tags=["reminders"])

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


@router.get(
    "",
    response_model=list[ReminderResponse],
    summary="List reminders",
    description="List the caller's reminders, earliest scheduled first.",
)
async def list_reminders(
    user: CurrentUser,
    service: ReminderServiceDep,
    status_filter: ReminderStatus | None = Query(default=None, alias="status"),
    reminder_type: ReminderType | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[ReminderResponse]:
    reminders = await service.list_reminders(
        user.id,
        status=status_filter,
        reminder_type=reminder_type,
        limit=limit,
        offset=offset,
    )
    return [ReminderResponse.model_validate(r) for r in reminders]


@router.get(
    "/upcoming",
    response_model=list[ReminderResponse],
    summary="Upcoming reminders",
    description="Pending reminders scheduled from now on, soonest first.",
)
async def list_upcoming_reminders(
    user: CurrentUser,
    service: ReminderServiceDep,
    reminder_settings: ReminderSettingsDep,
) -> list[ReminderResponse]:
    reminders = await service.list_upcoming(user.id, limit=reminder_settings.upcoming_limit)
    lazy_logger.debug(lambda: f"endpoint.list_upcoming(owner={user.id}) -> {len(reminders)} items")
    return [ReminderResponse.model_validate(r) for r in reminders]


@router.get(
    "/{reminder_id}",
    response_model=ReminderResponse,
    summary="Get reminder",
    responses={404: {"description": "Reminder not found"}},
)
async def get_reminder(
    reminder_id: UUID,
    user: CurrentUser,
    service: ReminderServiceDep,
) -> ReminderResponse:
    reminder = await service.get_reminder(user.id, reminder_id)
    return ReminderResponse.model_validate(reminder)


@router.post(
    "",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reminder",
    description="""
Create a reminder delivered by email, SMS or both.

Omitted `recipient_email` / `recipient_phone` default to the caller's
profile. A `scheduled_time` without an offset is read in the server's
timezone.

```json
{
  "title": "Pay rent",
  "message": "Transfer to landlord",
  "reminder_type": "email",
  "scheduled_time": "2026-11-01T09:00:00+05:30",
  "is_recurring": true,
  "recurring_pattern": "monthly"
}
```
""",
)
async def create_reminder(
    payload: ReminderCreate,
    user: CurrentUser,
    session: SessionDep,
    service: ReminderServiceDep,
) -> ReminderResponse:
    """Create a new reminder."""
    reminder = await service.create_reminder(user.id, payload)
    await session.commit()
    await session.refresh(reminder)
    return ReminderResponse.model_validate(reminder)


@router.put(
    "/{reminder_id}",
    response_model=ReminderResponse,
    summary="Update a reminder",
    description="Partially update a reminder that has not been dispatched yet.",
    responses={
        404: {"description": "Reminder not found"},
        409: {"description": "Reminder already sent or failed"},
    },
)
async def update_reminder(
    reminder_id: UUID,
    payload: ReminderUpdate,
    user: CurrentUser,
    session: SessionDep,
    service: ReminderServiceDep,
) -> ReminderResponse:
    try:
        reminder = await service.update_reminder(user.id, reminder_id, payload)
    except ReminderNotEditableError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except InvalidRecurrenceError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    await session.commit()
    await session.refresh(reminder)
    return ReminderResponse.model_validate(reminder)


@router.delete(
    "/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a reminder",
    description="Permanently delete a reminder.",
    responses={404: {"description": "Reminder not found"}},
)
async def delete_reminder(
    reminder_id: UUID,
    user: CurrentUser,
    session: SessionDep,
    service: ReminderServiceDep,
) -> None:
    """Delete a reminder permanently."""
    await service.delete_reminder(user.id, reminder_id)
    await session.commit()

    # INFO - permanent data removal (audit trail)
    logger.info(
        "Reminder deleted",
        extra={"reminder_id": str(reminder_id), "operation": "endpoint.delete_reminder"},
    )


__all__ = ["router"]
