"""SMS settings for the Twilio transport.

Environment variables use TWILIO_ prefix, matching Twilio's own naming.
Example: TWILIO_ACCOUNT_SID=AC..., TWILIO_AUTH_TOKEN=..., TWILIO_PHONE_NUMBER=+15005550006
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SmsSettings(BaseSettings):
    """SMS delivery configuration."""

    backend: Literal["twilio", "console"] = Field(
        default="twilio",
        description="SMS backend: twilio (production) or console (dev)",
    )
    account_sid: str | None = Field(
        default=None,
        max_length=64,
        description="Twilio account SID",
    )
    auth_token: SecretStr | None = Field(
        default=None,
        description="Twilio auth token",
    )
    phone_number: str | None = Field(
        default=None,
        max_length=20,
        description="Sender phone number in E.164 format",
    )
    api_base_url: str = Field(
        default="https://api.twilio.com",
        description="Twilio REST API base URL",
    )
    timeout: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP timeout for Twilio requests in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="TWILIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check that every Twilio credential is present."""
        if self.backend == "console":
            return True
        return bool(self.account_sid and self.auth_token and self.phone_number)
