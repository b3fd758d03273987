"""Twilio SMS provider.

Talks to the Twilio REST API directly over httpx:

    POST {api_base_url}/2010-04-01/Accounts/{AccountSid}/Messages.json
    auth:  (AccountSid, AuthToken)
    form:  To, From, Body

Usage:
    provider = TwilioProvider(get_sms_settings())
    result = await provider.send(SmsMessage(to="+919800000000", body="..."))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from .base import BaseSmsProvider, SmsDeliveryResult

if TYPE_CHECKING:
    from helperbuddy.core.settings.sms import SmsSettings
    from helperbuddy.infra.sms.schemas import SmsMessage

logger = logging.getLogger(__name__)


class TwilioProvider(BaseSmsProvider):
    """SMS provider backed by Twilio's Messages resource.

    Missing credentials are not an error at construction time: sends
    short-circuit with NOT_CONFIGURED and no request is made.
    """

    API_VERSION = "2010-04-01"

    def __init__(
        self,
        settings: SmsSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings)
        self._account_sid = settings.account_sid
        self._auth_token = settings.auth_token.get_secret_value() if settings.auth_token else None
        self._from_number = settings.phone_number
        self._base_url = settings.api_base_url.rstrip("/")
        self._timeout = settings.timeout
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "twilio"

    @property
    def is_configured(self) -> bool:
        return bool(self._account_sid and self._auth_token and self._from_number)

    @property
    def messages_url(self) -> str:
        return f"{self._base_url}/{self.API_VERSION}/Accounts/{self._account_sid}/Messages.json"

    async def _do_send(self, message: SmsMessage) -> SmsDeliveryResult:
        if not self.is_configured:
            return SmsDeliveryResult.failure_result(
                provider=self.provider_name,
                error="Twilio credentials are not configured",
                error_code="NOT_CONFIGURED",
            )

        form_data = {"To": message.to, "From": self._from_number, "Body": message.body}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    self.messages_url,
                    data=form_data,
                    auth=(self._account_sid, self._auth_token),
                )
        except httpx.TimeoutException:
            return SmsDeliveryResult.failure_result(
                provider=self.provider_name,
                error="Twilio API timeout",
                error_code="TIMEOUT",
            )
        except httpx.HTTPError as e:
            return SmsDeliveryResult.failure_result(
                provider=self.provider_name,
                error=f"Twilio HTTP error: {e}",
                error_code="HTTP_ERROR",
            )

        if response.status_code in (200, 201):
            payload = response.json()
            return SmsDeliveryResult.success_result(
                message_id=payload.get("sid", ""),
                provider=self.provider_name,
                metadata={"status": payload.get("status"), "segments": payload.get("num_segments")},
            )

        # Twilio error bodies carry {"code": ..., "message": ..., "more_info": ...}
        error_body = response.text
        twilio_code = None
        try:
            error_json = response.json()
            error_body = error_json.get("message", error_body)
            twilio_code = error_json.get("code")
        except ValueError:
            logger.debug("Non-JSON Twilio error body", extra={"status_code": response.status_code})

        return SmsDeliveryResult.failure_result(
            provider=self.provider_name,
            error=f"Twilio API error ({response.status_code}): {error_body}",
            error_code=self._classify_http_error(response.status_code),
            metadata={"status_code": response.status_code, "twilio_code": twilio_code},
        )

    def _classify_http_error(self, status_code: int) -> str:
        """Classify HTTP status code into error code."""
        if status_code == 401:
            return "AUTH_FAILED"
        if status_code == 429:
            return "RATE_LIMITED"
        if status_code == 400:
            return "BAD_REQUEST"
        if status_code == 404:
            return "ACCOUNT_NOT_FOUND"
        if status_code >= 500:
            return "SERVER_ERROR"
        return "API_ERROR"


__all__ = ["TwilioProvider"]
