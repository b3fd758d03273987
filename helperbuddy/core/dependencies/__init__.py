"""FastAPI dependencies for route handlers.

Usage:
    from helperbuddy.core.dependencies import CurrentUser, get_db_session

    @router.get("/items")
    async def list_items(
        user: CurrentUser,
        session: AsyncSession = Depends(get_db_session),
    ):
        ...
"""

from __future__ import annotations

from .auth import CurrentUser, get_current_user
from .database import get_db_session

__all__ = ["CurrentUser", "get_current_user", "get_db_session"]
