"""Email provider contract.

Concrete providers implement ``_do_send``; ``send`` wraps it with timing
and logging, and turns any escaping exception into a failed result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
import logging
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from helperbuddy.core.settings.email import EmailSettings
    from helperbuddy.infra.email.schemas import EmailMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailDeliveryResult:
    """Outcome of one send. ``error_code`` is stable (AUTH_FAILED, TIMEOUT, ...)."""

    success: bool
    message_id: str | None
    provider: str
    recipients_accepted: list[str] = field(default_factory=list)
    recipients_rejected: list[str] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None
    duration_ms: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (self.success or self.error):
            object.__setattr__(self, "error", "Unknown error")

    @classmethod
    def success_result(
        cls,
        message_id: str,
        provider: str,
        recipients: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> EmailDeliveryResult:
        return cls(True, message_id, provider, list(recipients or ()), metadata=dict(metadata or {}))

    @classmethod
    def failure_result(
        cls,
        provider: str,
        error: str,
        error_code: str | None = None,
        recipients_rejected: list[str] | None = None,
        duration_ms: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> EmailDeliveryResult:
        return cls(
            False,
            None,
            provider,
            recipients_rejected=list(recipients_rejected or ()),
            error=error,
            error_code=error_code,
            duration_ms=duration_ms,
            metadata=dict(metadata or {}),
        )


class BaseEmailProvider(ABC):
    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings
        logger.debug("Email provider ready", extra={"provider": self.provider_name})

    @property
    def settings(self) -> EmailSettings:
        return self._settings

    @property
    @abstractmethod
    def provider_name(self) -> str: ...

    @abstractmethod
    async def _do_send(self, message: EmailMessage) -> EmailDeliveryResult: ...

    async def send(self, message: EmailMessage) -> EmailDeliveryResult:
        """Deliver ``message``. Never raises."""
        started = time.perf_counter()
        try:
            result = await self._do_send(message)
        except Exception as e:
            logger.exception("Email provider crashed", extra={"provider": self.provider_name})
            result = EmailDeliveryResult.failure_result(
                provider=self.provider_name,
                error=str(e) or type(e).__name__,
                error_code="UNEXPECTED_ERROR",
            )

        if result.duration_ms is None:
            result = replace(result, duration_ms=int((time.perf_counter() - started) * 1000))
        self._log_result(result)
        return result

    def _log_result(self, result: EmailDeliveryResult) -> None:
        extra = {
            "provider": self.provider_name,
            "message_id": result.message_id,
            "duration_ms": result.duration_ms,
        }
        if result.success:
            logger.info("Email accepted", extra={**extra, "recipients": len(result.recipients_accepted)})
        else:
            logger.warning(
                "Email rejected",
                extra={**extra, "error": result.error, "error_code": result.error_code},
            )


__all__ = ["BaseEmailProvider", "EmailDeliveryResult"]
