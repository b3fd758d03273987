"""Email delivery providers.

- smtp: aiosmtplib-based SMTP delivery
- console: logs messages (development)
"""

from __future__ import annotations

from .base import BaseEmailProvider, EmailDeliveryResult
from .console import ConsoleProvider
from .factory import create_email_provider
from .smtp import SMTPProvider

__all__ = [
    "BaseEmailProvider",
    "ConsoleProvider",
    "EmailDeliveryResult",
    "SMTPProvider",
    "create_email_provider",
]
