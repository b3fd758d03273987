"""Generic repository over an async SQLAlchemy session.

The session is always passed in; commits and rollbacks stay with the
caller so one unit of work can span several repositories.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import select

from helperbuddy.core.database.exceptions import NotFoundError
from helperbuddy.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Primary-key lookups plus create/save/delete for one model.

    Feature repositories subclass this and add their own query methods.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        name = f"repository.{model.__name__}"
        self._logger = logging.getLogger(name)
        self._lazy = get_lazy_logger(name)

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        instance = await session.get(self.model, id)
        self._lazy.debug(lambda: f"db.get: {self.entity_name}({id}) found={instance is not None}")
        return instance

    async def get_or_raise(self, session: AsyncSession, id: Any) -> T:  # noqa: A002
        """Like get(), but a missing row raises NotFoundError."""
        instance = await self.get(session, id)
        if instance is None:
            raise NotFoundError(self.entity_name, {"id": id})
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Single row where ``attr == value``, e.g. ``get_by(session, User.email, email)``."""
        result = await session.execute(select(self.model).where(attr == value))
        return result.scalar_one_or_none()

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Insert and refresh so server defaults and the generated id are loaded."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        self._lazy.debug(lambda: f"db.create: {self.entity_name}(id={getattr(instance, 'id', None)})")
        return instance

    async def save(self, session: AsyncSession, instance: T) -> T:
        session.add(instance)
        await session.flush()
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        entity_id = getattr(instance, "id", None)
        await session.delete(instance)
        await session.flush()
        self._logger.info(
            "Entity deleted",
            extra={"entity": self.entity_name, "id": str(entity_id), "operation": "db.delete"},
        )


__all__ = ["BaseRepository"]
