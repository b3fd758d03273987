"""SMS message model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SmsMessage(BaseModel):
    """A single outgoing text message."""

    to: str = Field(
        min_length=3,
        max_length=20,
        description="Destination phone number (E.164 recommended)",
    )
    body: str = Field(
        min_length=1,
        max_length=1600,
        description="Message text; Twilio splits long bodies into segments",
    )


__all__ = ["SmsMessage"]
