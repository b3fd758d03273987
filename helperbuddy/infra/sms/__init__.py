"""SMS infrastructure: message schema and delivery providers."""

from __future__ import annotations

from .providers import (
    BaseSmsProvider,
    ConsoleSmsProvider,
    SmsDeliveryResult,
    TwilioProvider,
    create_sms_provider,
)
from .schemas import SmsMessage

__all__ = [
    "BaseSmsProvider",
    "ConsoleSmsProvider",
    "SmsDeliveryResult",
    "SmsMessage",
    "TwilioProvider",
    "create_sms_provider",
]
