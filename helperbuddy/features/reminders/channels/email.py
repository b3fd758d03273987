"""Email channel sender.

Reduces the provider's structured EmailDeliveryResult to the boolean the
dispatcher needs. Nothing raised by message building or the provider
crosses this boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from helperbuddy.features.reminders.channels.templates import render_email, render_subject
from helperbuddy.infra.email import EmailMessage, create_email_provider

if TYPE_CHECKING:
    from datetime import datetime, tzinfo

    from helperbuddy.core.settings.email import EmailSettings
    from helperbuddy.infra.email import BaseEmailProvider

logger = logging.getLogger(__name__)


class EmailSender:
    """Send reminder emails through a configured provider.

    A sender without a provider (email disabled) reports every send as
    failed without touching the network.
    """

    def __init__(
        self,
        provider: BaseEmailProvider | None,
        *,
        tz: tzinfo | None = None,
    ) -> None:
        self._provider = provider
        self._tz = tz

    @property
    def enabled(self) -> bool:
        return self._provider is not None

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str | None = None,
    ) -> bool:
        """Deliver one email. Returns True when the provider accepted it."""
        if self._provider is None:
            logger.warning(
                "Email not sent: no email provider configured",
                extra={"channel": "email", "error_code": "NOT_CONFIGURED"},
            )
            return False

        try:
            message = EmailMessage(
                to=[to],
                subject=subject,
                body_html=html_body,
                body_text=text_body,
            )
            result = await self._provider.send(message)
        except Exception as e:
            logger.exception(
                "Email send raised",
                extra={"channel": "email", "provider": self._provider.provider_name, "error": str(e)},
            )
            return False

        if not result.success:
            logger.warning(
                "Email delivery failed",
                extra={
                    "channel": "email",
                    "provider": result.provider,
                    "error": result.error,
                    "error_code": result.error_code,
                },
            )
        return result.success

    async def send_reminder(
        self,
        recipient: str | None,
        title: str,
        message: str,
        scheduled_time: datetime,
    ) -> bool:
        if not recipient:
            logger.warning("Email not sent: reminder has no recipient email", extra={"channel": "email"})
            return False
        try:
            html_body, text_body = render_email(title, message, scheduled_time, self._tz)
        except Exception:
            logger.exception("Failed to render reminder email", extra={"channel": "email"})
            return False
        return await self.send(recipient, render_subject(title), html_body, text_body)


def build_email_sender(settings: EmailSettings, *, tz: tzinfo | None = None) -> EmailSender:
    """Create an EmailSender for the configured backend."""
    return EmailSender(create_email_provider(settings), tz=tz)


__all__ = ["EmailSender", "build_email_sender"]
