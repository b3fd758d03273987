"""User directory: default contact details per user.

Reminder creation falls back to these when the caller omits a recipient.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from helperbuddy.core.services.base import BaseService
from helperbuddy.features.users.repository import UserRepository, get_user_repository

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True, slots=True)
class ContactInfo:
    """Default recipients for a user."""

    email: str | None
    phone: str | None


class UserDirectory(BaseService):
    """Read-only view over user profiles."""

    def __init__(self, session: AsyncSession, repository: UserRepository | None = None) -> None:
        super().__init__()
        self._session = session
        self._repository = repository or get_user_repository()

    async def default_contact(self, user_id: UUID) -> ContactInfo:
        """Return the profile email and phone of ``user_id``.

        Raises:
            NotFoundError: If the user does not exist.
        """
        user = await self._repository.get_or_raise(self._session, user_id)
        self._lazy.debug(
            lambda: f"directory.default_contact({user_id}) -> email={'yes' if user.email else 'no'}, phone={'yes' if user.phone else 'no'}"
        )
        return ContactInfo(email=user.email, phone=user.phone)


__all__ = ["ContactInfo", "UserDirectory"]
