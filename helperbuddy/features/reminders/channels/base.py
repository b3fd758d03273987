"""Sender protocols used by the reminder dispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime


class ReminderEmailSender(Protocol):
    """Email channel as seen by the dispatcher.

    Implementations return False on any failure and never raise.
    """

    async def send_reminder(
        self,
        recipient: str | None,
        title: str,
        message: str,
        scheduled_time: datetime,
    ) -> bool: ...


class ReminderSmsSender(Protocol):
    """SMS channel as seen by the dispatcher. Same failure contract."""

    async def send_reminder(
        self,
        recipient: str | None,
        title: str,
        message: str,
    ) -> bool: ...


__all__ = ["ReminderEmailSender", "ReminderSmsSender"]
