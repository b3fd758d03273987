"""SQLAlchemy models for users."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from helperbuddy.core.database import UUIDTimestampedBase


class User(UUIDTimestampedBase):
    """Account owner of reminders.

    Only the profile fields the reminder subsystem needs live here;
    credentials and sessions belong to the auth service.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Default recipient for email reminders",
    )
    phone: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="Default recipient for SMS reminders (E.164)",
    )
