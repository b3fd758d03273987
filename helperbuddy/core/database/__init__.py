"""Core database package: declarative base, mixins, column types and repository.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming convention
    - UUIDPKMixin, TimestampMixin
    - UUIDTimestampedBase: UUID PK + timestamps

Repository:
    - BaseRepository[T]: Generic CRUD with explicit session passing

Custom Types:
    - UTCDateTime: Aware datetimes that round-trip as UTC on every backend
"""

from __future__ import annotations

from .base import NAMING_CONVENTION, Base, TimestampMixin, UUIDPKMixin, UUIDTimestampedBase
from .exceptions import NotFoundError, RepositoryError
from .repository import BaseRepository
from .types import UTCDateTime

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "NotFoundError",
    "RepositoryError",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDPKMixin",
    "UUIDTimestampedBase",
]
