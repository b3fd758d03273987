"""Current-user dependency.

Session handling lives in the upstream auth gateway, which forwards the
authenticated user's id in the ``X-User-Id`` header. This dependency
resolves that id to a stored user and rejects anything else with 401.
"""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from helperbuddy.core.dependencies.database import get_db_session
from helperbuddy.features.users.models import User
from helperbuddy.features.users.repository import UserRepository, get_user_repository
from helperbuddy.infra.logging import set_log_context

logger = logging.getLogger(__name__)


async def get_current_user(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[UserRepository, Depends(get_user_repository)],
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> User:
    """Resolve the authenticated user.

    Raises:
        HTTPException: 401 when the header is missing, malformed or unknown.

    Example:
        @router.get("/me")
        async def me(user: Annotated[User, Depends(get_current_user)]):
            return {"id": str(user.id)}
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        user_id = UUID(x_user_id)
    except ValueError:
        logger.info("Malformed user id header", extra={"header_value": x_user_id[:64]})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        ) from None

    user = await repo.get(session, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )

    set_log_context(user_id=str(user.id))
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]

__all__ = ["CurrentUser", "get_current_user"]
