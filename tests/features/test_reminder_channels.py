"""Tests for the email and SMS channel senders and message rendering."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import aiosmtplib
import httpx
import pytest

from helperbuddy.core.settings.email import EmailSettings
from helperbuddy.core.settings.sms import SmsSettings
from helperbuddy.features.reminders.channels import (
    EmailSender,
    SmsSender,
    build_email_sender,
    build_sms_sender,
)
from helperbuddy.features.reminders.channels.templates import (
    format_scheduled_time,
    render_email,
    render_sms,
    render_subject,
)
from helperbuddy.infra.email import (
    BaseEmailProvider,
    ConsoleProvider,
    EmailDeliveryResult,
    EmailMessage,
    SMTPProvider,
)
from helperbuddy.infra.email.providers.smtp import classify_smtp_error
from helperbuddy.infra.sms import ConsoleSmsProvider, TwilioProvider

IST = ZoneInfo("Asia/Kolkata")
SCHEDULED = datetime(2026, 10, 19, 4, 0, tzinfo=UTC)


class RecordingEmailProvider(BaseEmailProvider):
    """Provider that keeps every message instead of sending it."""

    def __init__(self, settings: EmailSettings, *, succeed: bool = True) -> None:
        super().__init__(settings)
        self.succeed = succeed
        self.messages = []

    @property
    def provider_name(self) -> str:
        return "recording"

    async def _do_send(self, message):
        self.messages.append(message)
        if self.succeed:
            return EmailDeliveryResult.success_result(
                message_id="msg-1",
                provider=self.provider_name,
                recipients=message.all_recipients,
            )
        return EmailDeliveryResult.failure_result(
            provider=self.provider_name,
            error="Recipient refused",
            error_code="RECIPIENTS_REFUSED",
        )


@pytest.fixture
def email_settings() -> EmailSettings:
    return EmailSettings(enabled=True, backend="console")


def _twilio_settings(**overrides) -> SmsSettings:
    values = {
        "backend": "twilio",
        "account_sid": "AC123",
        "auth_token": "secret-token",
        "phone_number": "+15550001111",
    }
    values.update(overrides)
    return SmsSettings(**values)


@pytest.mark.unit
class TestRendering:
    def test_subject(self):
        assert render_subject("Pay rent") == "🔔 Reminder: Pay rent"

    def test_sms_body(self):
        assert render_sms("Pay rent", "Transfer to landlord") == (
            "🔔 HelperBuddy Reminder: Pay rent\n\nTransfer to landlord"
        )

    def test_scheduled_time_shown_in_local_zone(self):
        assert format_scheduled_time(SCHEDULED, IST) == "19 Oct 2026, 09:30 AM IST"

    def test_email_bodies_contain_content(self):
        html_body, text_body = render_email("Pay rent", "Transfer to landlord", SCHEDULED, IST)

        assert "🔔 HelperBuddy Reminder" in html_body
        assert "Pay rent" in html_body
        assert "Transfer to landlord" in html_body
        assert "This reminder was scheduled for 19 Oct 2026, 09:30 AM IST" in html_body
        assert "Transfer to landlord" in text_body
        assert "<" not in text_body

    def test_html_body_escapes_user_content(self):
        html_body, _ = render_email("<script>alert(1)</script>", "a & b", SCHEDULED)

        assert "<script>" not in html_body
        assert "&lt;script&gt;" in html_body
        assert "a &amp; b" in html_body


@pytest.mark.unit
class TestEmailSender:
    @pytest.mark.asyncio
    async def test_send_reminder_success(self, email_settings):
        provider = RecordingEmailProvider(email_settings)
        sender = EmailSender(provider, tz=IST)

        ok = await sender.send_reminder("asha@example.com", "Pay rent", "Transfer to landlord", SCHEDULED)

        assert ok is True
        message = provider.messages[0]
        assert message.all_recipients == ["asha@example.com"]
        assert message.subject == "🔔 Reminder: Pay rent"
        assert "09:30 AM IST" in message.body_html
        assert "Transfer to landlord" in message.body_text

    @pytest.mark.asyncio
    async def test_provider_failure_returns_false(self, email_settings):
        sender = EmailSender(RecordingEmailProvider(email_settings, succeed=False))

        assert await sender.send("asha@example.com", "Subject", "<p>hi</p>") is False

    @pytest.mark.asyncio
    async def test_without_provider_returns_false(self):
        sender = EmailSender(None)

        assert sender.enabled is False
        assert await sender.send_reminder("asha@example.com", "t", "m", SCHEDULED) is False

    @pytest.mark.asyncio
    async def test_missing_recipient_returns_false(self, email_settings):
        provider = RecordingEmailProvider(email_settings)
        sender = EmailSender(provider)

        assert await sender.send_reminder(None, "t", "m", SCHEDULED) is False
        assert await sender.send_reminder("", "t", "m", SCHEDULED) is False
        assert provider.messages == []

    @pytest.mark.asyncio
    async def test_invalid_address_returns_false(self, email_settings):
        provider = RecordingEmailProvider(email_settings)
        sender = EmailSender(provider)

        assert await sender.send("not-an-address", "Subject", "<p>hi</p>") is False
        assert provider.messages == []

    @pytest.mark.asyncio
    async def test_console_backend_succeeds(self, email_settings):
        sender = build_email_sender(email_settings, tz=IST)

        assert sender.enabled is True
        assert await sender.send_reminder("asha@example.com", "t", "m", SCHEDULED) is True

    def test_disabled_settings_build_sender_without_provider(self):
        sender = build_email_sender(EmailSettings(enabled=False))
        assert sender.enabled is False

    def test_console_provider_selected(self, email_settings):
        sender = build_email_sender(email_settings)
        assert isinstance(sender._provider, ConsoleProvider)


@pytest.mark.unit
class TestSmsSender:
    @pytest.mark.asyncio
    async def test_console_backend_succeeds(self):
        sender = build_sms_sender(SmsSettings(backend="console"))

        assert isinstance(sender._provider, ConsoleSmsProvider)
        assert await sender.send_reminder("+919800000001", "Pay rent", "Transfer") is True

    @pytest.mark.asyncio
    async def test_missing_recipient_returns_false(self):
        sender = SmsSender(ConsoleSmsProvider(SmsSettings(backend="console")))

        assert await sender.send_reminder(None, "t", "m") is False

    @pytest.mark.asyncio
    async def test_invalid_number_returns_false(self):
        sender = SmsSender(ConsoleSmsProvider(SmsSettings(backend="console")))

        # Too short for SmsMessage
        assert await sender.send("1", "hello") is False


@pytest.mark.unit
class TestTwilioProvider:
    """Twilio REST calls against an httpx mock transport."""

    @pytest.mark.asyncio
    async def test_successful_send_posts_form(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"sid": "SM123", "status": "queued", "num_segments": "1"})

        provider = TwilioProvider(_twilio_settings(), transport=httpx.MockTransport(handler))
        sender = SmsSender(provider)

        ok = await sender.send_reminder("+919800000001", "Pay rent", "Transfer to landlord")

        assert ok is True
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/2010-04-01/Accounts/AC123/Messages.json"
        assert request.headers["Authorization"].startswith("Basic ")
        form = dict(httpx.QueryParams(request.content.decode()))
        assert form["To"] == "+919800000001"
        assert form["From"] == "+15550001111"
        assert form["Body"] == "🔔 HelperBuddy Reminder: Pay rent\n\nTransfer to landlord"

    @pytest.mark.asyncio
    async def test_auth_failure_is_classified(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"code": 20003, "message": "Authenticate"})

        provider = TwilioProvider(_twilio_settings(), transport=httpx.MockTransport(handler))

        from helperbuddy.infra.sms import SmsMessage

        result = await provider.send(SmsMessage(to="+919800000001", body="hi"))

        assert result.success is False
        assert result.error_code == "AUTH_FAILED"
        assert result.metadata["twilio_code"] == 20003

    @pytest.mark.asyncio
    async def test_unconfigured_makes_no_request(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(201, json={"sid": "SM123"})

        provider = TwilioProvider(
            _twilio_settings(account_sid=None, auth_token=None),
            transport=httpx.MockTransport(handler),
        )
        sender = SmsSender(provider)

        assert provider.is_configured is False
        assert await sender.send_reminder("+919800000001", "t", "m") is False
        assert calls == 0

    @pytest.mark.asyncio
    async def test_transport_error_returns_false(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sender = SmsSender(TwilioProvider(_twilio_settings(), transport=httpx.MockTransport(handler)))

        assert await sender.send_reminder("+919800000001", "t", "m") is False


@pytest.mark.unit
class TestSMTPProvider:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (aiosmtplib.SMTPAuthenticationError(535, "bad credentials"), "AUTH_FAILED"),
            (aiosmtplib.SMTPConnectError("refused"), "CONNECTION_ERROR"),
            (aiosmtplib.SMTPTimeoutError("timed out"), "TIMEOUT"),
            (aiosmtplib.SMTPException("something else"), "SMTP_ERROR"),
        ],
    )
    def test_classify_smtp_error(self, exc, code):
        assert classify_smtp_error(exc) == code

    def test_requires_host(self):
        settings = EmailSettings.model_construct(smtp_host="")
        with pytest.raises(ValueError, match="SMTP host"):
            SMTPProvider(settings)

    def test_mime_message_has_text_then_html(self):
        settings = EmailSettings(
            _env_file=None,
            enabled=True,
            from_email="reminders@helperbuddy.app",
        )
        provider = SMTPProvider(settings)
        message = EmailMessage(
            to=["asha@example.com"],
            subject="🔔 Reminder: Pay rent",
            body_html="<h2>Pay rent</h2>",
            body_text="Pay rent",
        )

        mime = provider._build_mime_message(message)

        assert mime["From"] == "HelperBuddy <reminders@helperbuddy.app>"
        assert mime["To"] == "asha@example.com"
        assert mime["Message-ID"].endswith("@smtp.gmail.com>")
        assert [part.get_content_type() for part in mime.get_payload()] == [
            "text/plain",
            "text/html",
        ]
