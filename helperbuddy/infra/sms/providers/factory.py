"""SMS provider factory keyed by SmsSettings.backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .console import ConsoleSmsProvider
from .twilio import TwilioProvider

if TYPE_CHECKING:
    from helperbuddy.core.settings.sms import SmsSettings

    from .base import BaseSmsProvider

_REGISTRY: dict[str, type[BaseSmsProvider]] = {
    "twilio": TwilioProvider,
    "console": ConsoleSmsProvider,
}


def create_sms_provider(settings: SmsSettings) -> BaseSmsProvider:
    """Build the provider for the configured backend.

    Raises:
        ValueError: If the backend name is unknown.
    """
    provider_class = _REGISTRY.get(settings.backend)
    if provider_class is None:
        msg = f"Unknown SMS backend: {settings.backend}"
        raise ValueError(msg)
    return provider_class(settings)


__all__ = ["create_sms_provider"]
