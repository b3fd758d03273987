"""SMS channel sender."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from helperbuddy.features.reminders.channels.templates import render_sms
from helperbuddy.infra.sms import SmsMessage, create_sms_provider

if TYPE_CHECKING:
    from helperbuddy.core.settings.sms import SmsSettings
    from helperbuddy.infra.sms import BaseSmsProvider

logger = logging.getLogger(__name__)


class SmsSender:
    """Send reminder texts through a configured provider.

    Unconfigured Twilio credentials surface as a NOT_CONFIGURED failure from
    the provider, which makes no network call.
    """

    def __init__(self, provider: BaseSmsProvider) -> None:
        self._provider = provider

    async def send(self, to: str, text: str) -> bool:
        try:
            result = await self._provider.send(SmsMessage(to=to, body=text))
        except Exception as e:
            logger.exception(
                "SMS send raised",
                extra={"channel": "sms", "provider": self._provider.provider_name, "error": str(e)},
            )
            return False

        if not result.success:
            logger.warning(
                "SMS delivery failed",
                extra={
                    "channel": "sms",
                    "provider": result.provider,
                    "error": result.error,
                    "error_code": result.error_code,
                },
            )
        return result.success

    async def send_reminder(self, recipient: str | None, title: str, message: str) -> bool:
        if not recipient:
            logger.warning("SMS not sent: reminder has no recipient phone", extra={"channel": "sms"})
            return False
        return await self.send(recipient, render_sms(title, message))


def build_sms_sender(settings: SmsSettings) -> SmsSender:
    return SmsSender(create_sms_provider(settings))


__all__ = ["SmsSender", "build_sms_sender"]
