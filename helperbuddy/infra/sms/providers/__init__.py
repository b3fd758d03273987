"""SMS delivery providers.

- twilio: Twilio REST API over httpx
- console: logs messages (development)
"""

from __future__ import annotations

from .base import BaseSmsProvider, SmsDeliveryResult
from .console import ConsoleSmsProvider
from .factory import create_sms_provider
from .twilio import TwilioProvider

__all__ = [
    "BaseSmsProvider",
    "ConsoleSmsProvider",
    "SmsDeliveryResult",
    "TwilioProvider",
    "create_sms_provider",
]
