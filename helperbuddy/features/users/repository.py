"""Repository for the users feature."""
from __future__ import annotations

from typing import TYPE_CHECKING

from helperbuddy.core.database import BaseRepository
from helperbuddy.features.users.models import User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class UserRepository(BaseRepository[User]):
    """Data access for User records."""

    def __init__(self) -> None:
        super().__init__(User)

    async def find_by_email(self, session: AsyncSession, email: str) -> User | None:
        """Look up a user by exact email address."""
        return await self.get_by(session, User.email, email)


_user_repository: UserRepository | None = None


def get_user_repository() -> UserRepository:
    """Get UserRepository instance.

    Usage in FastAPI routes:
        from helperbuddy.features.users.repository import (
            UserRepository,
            get_user_repository,
        )

        @router.get("/{user_id}")
        async def get_user(
            user_id: UUID,
            session: AsyncSession = Depends(get_db_session),
            repo: UserRepository = Depends(get_user_repository),
        ):
            return await repo.get_or_raise(session, user_id)
    """
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository


__all__ = ["UserRepository", "get_user_repository"]
