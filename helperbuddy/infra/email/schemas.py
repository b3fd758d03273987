"""Email message model."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class EmailMessage(BaseModel):
    """A single outgoing email.

    Example:
        message = EmailMessage(
            to=["asha@example.com"],
            subject="🔔 Reminder: Pay rent",
            body_html="<h2>Pay rent</h2>",
        )
    """

    to: list[EmailStr] = Field(
        min_length=1,
        description="Primary recipients",
    )
    subject: str = Field(
        min_length=1,
        max_length=998,
        description="Subject line",
    )
    body_html: str | None = Field(
        default=None,
        description="HTML body",
    )
    body_text: str | None = Field(
        default=None,
        description="Plain text body",
    )
    from_email: EmailStr | None = Field(
        default=None,
        description="Sender address (provider default when unset)",
    )
    from_name: str | None = Field(
        default=None,
        max_length=100,
        description="Sender display name",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Additional MIME headers",
    )

    @property
    def all_recipients(self) -> list[str]:
        """Every envelope recipient."""
        return [str(address) for address in self.to]


__all__ = ["EmailMessage"]
