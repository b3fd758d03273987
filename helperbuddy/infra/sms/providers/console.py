"""Console SMS provider for development. Logs and always succeeds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
import uuid

from .base import BaseSmsProvider, SmsDeliveryResult

if TYPE_CHECKING:
    from helperbuddy.infra.sms.schemas import SmsMessage

logger = logging.getLogger(__name__)


class ConsoleSmsProvider(BaseSmsProvider):
    @property
    def provider_name(self) -> str:
        return "console"

    async def _do_send(self, message: SmsMessage) -> SmsDeliveryResult:
        message_id = f"console-{uuid.uuid4()}"
        logger.info(
            "SMS (console backend)",
            extra={"message_id": message_id, "to": message.to, "body": message.body},
        )
        return SmsDeliveryResult.success_result(
            message_id=message_id,
            provider=self.provider_name,
            metadata={"mode": "development"},
        )


__all__ = ["ConsoleSmsProvider"]
