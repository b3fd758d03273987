"""SMTP email provider (aiosmtplib).

Port 587 with STARTTLS is the default (Gmail-style app passwords); set
``EMAIL_USE_SSL=true`` and port 465 for implicit TLS.
"""

from __future__ import annotations

from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging
import ssl
from typing import TYPE_CHECKING
import uuid

import aiosmtplib

from .base import BaseEmailProvider, EmailDeliveryResult

if TYPE_CHECKING:
    from helperbuddy.core.settings.email import EmailSettings
    from helperbuddy.infra.email.schemas import EmailMessage

logger = logging.getLogger(__name__)

# Most specific first: SMTPRecipientsRefused and friends subclass SMTPException
_ERROR_CODES: tuple[tuple[type[aiosmtplib.SMTPException], str], ...] = (
    (aiosmtplib.SMTPAuthenticationError, "AUTH_FAILED"),
    (aiosmtplib.SMTPRecipientsRefused, "RECIPIENTS_REFUSED"),
    (aiosmtplib.SMTPConnectError, "CONNECTION_ERROR"),
    (aiosmtplib.SMTPTimeoutError, "TIMEOUT"),
)


def classify_smtp_error(exc: aiosmtplib.SMTPException) -> str:
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return "SMTP_ERROR"


class SMTPProvider(BaseEmailProvider):
    """Deliver mail through one SMTP connection per message.

    Example:
        provider = SMTPProvider(get_email_settings())
        result = await provider.send(message)
    """

    def __init__(self, settings: EmailSettings) -> None:
        if not settings.smtp_host:
            msg = "SMTP host is required for SMTP provider"
            raise ValueError(msg)
        super().__init__(settings)
        self._password = settings.smtp_password.get_secret_value() if settings.smtp_password else None

    @property
    def provider_name(self) -> str:
        return "smtp"

    def _tls_context(self) -> ssl.SSLContext | None:
        if not (self._settings.use_tls or self._settings.use_ssl):
            return None
        context = ssl.create_default_context()
        if not self._settings.validate_certs:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    async def _do_send(self, message: EmailMessage) -> EmailDeliveryResult:
        settings = self._settings
        mime_message = self._build_mime_message(message)
        message_id = mime_message["Message-ID"]

        client = aiosmtplib.SMTP(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            use_tls=settings.use_ssl,
            start_tls=settings.use_tls,
            tls_context=self._tls_context(),
            timeout=settings.timeout,
        )
        try:
            async with client:
                if settings.requires_auth:
                    await client.login(settings.smtp_username, self._password)
                errors, _response = await client.send_message(mime_message)
        except aiosmtplib.SMTPException as e:
            code = classify_smtp_error(e)
            return EmailDeliveryResult.failure_result(
                provider=self.provider_name,
                error=f"SMTP {code.lower().replace('_', ' ')}: {e}",
                error_code=code,
                recipients_rejected=(
                    message.all_recipients if code in {"AUTH_FAILED", "RECIPIENTS_REFUSED"} else None
                ),
            )

        rejected = list(errors) if errors else []
        accepted = [address for address in message.all_recipients if address not in rejected]
        if rejected:
            logger.warning(
                "SMTP server rejected recipients",
                extra={"message_id": message_id, "rejected": rejected},
            )

        if not accepted:
            return EmailDeliveryResult.failure_result(
                provider=self.provider_name,
                error="No recipients accepted",
                error_code="RECIPIENTS_REFUSED",
                recipients_rejected=rejected,
            )
        return EmailDeliveryResult.success_result(
            message_id=message_id,
            provider=self.provider_name,
            recipients=accepted,
            metadata={"host": settings.smtp_host, "port": settings.smtp_port},
        )

    def _build_mime_message(self, message: EmailMessage) -> MIMEMultipart:
        """multipart/alternative with the text part first, HTML preferred."""
        sender = str(message.from_email or self._settings.sender_address)
        display_name = message.from_name or self._settings.from_name

        mime = MIMEMultipart("alternative")
        mime["From"] = f"{display_name} <{sender}>" if display_name else sender
        mime["To"] = ", ".join(message.all_recipients)
        mime["Subject"] = message.subject
        mime["Message-ID"] = f"<{uuid.uuid4()}@{self._settings.smtp_host}>"
        mime["Date"] = datetime.now(UTC).strftime("%a, %d %b %Y %H:%M:%S +0000")
        for name, value in message.headers.items():
            mime[name] = value

        if message.body_text:
            mime.attach(MIMEText(message.body_text, "plain", "utf-8"))
        if message.body_html:
            mime.attach(MIMEText(message.body_html, "html", "utf-8"))
        return mime


__all__ = ["SMTPProvider", "classify_smtp_error"]
