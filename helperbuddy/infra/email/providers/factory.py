"""Email provider factory.

Maps EmailSettings.backend to a provider class.

Usage:
    provider = create_email_provider(get_email_settings())
    if provider is not None:
        result = await provider.send(message)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .console import ConsoleProvider
from .smtp import SMTPProvider

if TYPE_CHECKING:
    from helperbuddy.core.settings.email import EmailSettings

    from .base import BaseEmailProvider

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[BaseEmailProvider]] = {
    "smtp": SMTPProvider,
    "console": ConsoleProvider,
}


def create_email_provider(settings: EmailSettings) -> BaseEmailProvider | None:
    """Build the provider for the configured backend.

    Returns:
        The provider, or None when email delivery is disabled.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if not settings.is_configured:
        logger.info(
            "Email delivery disabled",
            extra={"enabled": settings.enabled, "backend": settings.backend},
        )
        return None

    provider_class = _REGISTRY.get(settings.backend)
    if provider_class is None:
        msg = f"Unknown email backend: {settings.backend}"
        raise ValueError(msg)
    return provider_class(settings)


__all__ = ["create_email_provider"]
