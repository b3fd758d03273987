"""Custom SQLAlchemy column types.

UTCDateTime:
    Timezone-aware instant that always round-trips as UTC. PostgreSQL keeps
    the offset natively; SQLite drops it and hands back naive values, which
    this type re-tags so comparisons against aware datetimes keep working.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware datetime stored and returned in UTC.

    Naive values are rejected on bind; an instant with no zone is
    ambiguous and callers must localize it first.

    Example:
        >>> class Event(Base):
        ...     starts_at: Mapped[datetime] = mapped_column(UTCDateTime())
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        """Normalize an aware datetime to UTC.

        Raises:
            ValueError: If the datetime is naive.
        """
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None or value.utcoffset() is None:
            msg = "UTCDateTime requires a timezone-aware datetime"
            raise ValueError(msg)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        """Attach UTC to naive values read back from the database."""
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


__all__ = ["UTCDateTime"]
