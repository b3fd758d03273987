"""Base SMS provider abstract class.

Mirrors the email provider contract: subclasses implement `_do_send`,
and `send` never lets an exception escape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
import logging
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from helperbuddy.core.settings.sms import SmsSettings
    from helperbuddy.infra.sms.schemas import SmsMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmsDeliveryResult:
    """Outcome of one send; ``message_id`` is the Twilio SID when delivered."""

    success: bool
    message_id: str | None
    provider: str
    error: str | None = None
    error_code: str | None = None
    duration_ms: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.success and not self.error:
            object.__setattr__(self, "error", "Unknown error")

    @classmethod
    def success_result(
        cls,
        message_id: str,
        provider: str,
        metadata: dict[str, Any] | None = None,
    ) -> SmsDeliveryResult:
        return cls(
            success=True,
            message_id=message_id,
            provider=provider,
            metadata=metadata or {},
        )

    @classmethod
    def failure_result(
        cls,
        provider: str,
        error: str,
        error_code: str | None = None,
        duration_ms: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> SmsDeliveryResult:
        return cls(
            success=False,
            message_id=None,
            provider=provider,
            error=error,
            error_code=error_code,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )


class BaseSmsProvider(ABC):
    """Abstract base class for SMS providers."""

    def __init__(self, settings: SmsSettings) -> None:
        self._settings = settings

    @property
    @abstractmethod
    def provider_name(self) -> str:
        ...

    @abstractmethod
    async def _do_send(self, message: SmsMessage) -> SmsDeliveryResult:
        ...

    async def send(self, message: SmsMessage) -> SmsDeliveryResult:
        """Deliver ``message``. Never raises."""
        started = time.perf_counter()
        try:
            result = await self._do_send(message)
        except Exception as e:
            logger.exception("SMS provider crashed", extra={"provider": self.provider_name})
            result = SmsDeliveryResult.failure_result(
                provider=self.provider_name,
                error=str(e) or type(e).__name__,
                error_code="UNEXPECTED_ERROR",
            )

        if result.duration_ms is None:
            result = replace(result, duration_ms=int((time.perf_counter() - started) * 1000))
        extra = {
            "provider": self.provider_name,
            "message_id": result.message_id,
            "duration_ms": result.duration_ms,
        }
        if result.success:
            logger.info("SMS accepted", extra=extra)
        else:
            logger.warning(
                "SMS rejected",
                extra={**extra, "error": result.error, "error_code": result.error_code},
            )
        return result


__all__ = ["BaseSmsProvider", "SmsDeliveryResult"]
