"""Outbound email settings.

Environment variables use EMAIL_ prefix.
Example: EMAIL_ENABLED=true, EMAIL_SMTP_USERNAME=alerts@example.com
"""

from __future__ import annotations

from typing import Literal

from pydantic import EmailStr, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailSettings(BaseSettings):
    """Reminder email delivery.

    ``backend="console"`` logs messages instead of sending them. With
    ``enabled=False`` (the default) no provider is built and every email
    reminder is reported as undelivered.
    """

    enabled: bool = Field(default=False, description="Send reminder emails")
    backend: Literal["smtp", "console"] = Field(default="smtp", description="smtp or console")

    # SMTP
    smtp_host: str = Field(default="smtp.gmail.com", min_length=1, max_length=255)
    smtp_port: int = Field(default=587, ge=1, le=65535, description="587 STARTTLS, 465 implicit TLS")
    smtp_username: str | None = Field(default=None, max_length=255)
    smtp_password: SecretStr | None = Field(default=None, description="App password for the SMTP account")
    use_tls: bool = Field(default=True, description="Upgrade with STARTTLS")
    use_ssl: bool = Field(default=False, description="Connect with implicit TLS")
    validate_certs: bool = Field(default=True)
    timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="SMTP timeout in seconds")

    # Sender
    from_email: EmailStr | None = Field(default=None, description="Defaults to smtp_username")
    from_name: str = Field(default="HelperBuddy", max_length=100)

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def check_transport_options(self) -> EmailSettings:
        """TLS modes are exclusive; credentials come as a pair."""
        if self.use_tls and self.use_ssl:
            msg = "use_tls and use_ssl are mutually exclusive"
            raise ValueError(msg)
        if (self.smtp_username is None) != (self.smtp_password is None):
            msg = "smtp_username and smtp_password must be set together"
            raise ValueError(msg)
        return self

    @property
    def is_configured(self) -> bool:
        """True when a provider should be built."""
        if not self.enabled:
            return False
        return self.backend == "console" or bool(self.smtp_host)

    @property
    def requires_auth(self) -> bool:
        return self.smtp_username is not None

    @property
    def sender_address(self) -> str:
        """Envelope sender used for outgoing mail."""
        return str(self.from_email or self.smtp_username or "noreply@helperbuddy.local")


__all__ = ["EmailSettings"]
