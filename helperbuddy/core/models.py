"""Registry of ORM models.

Importing this module registers every feature's tables on Base.metadata,
which create_all and test fixtures rely on.
"""

from __future__ import annotations

from helperbuddy.core.database import Base


def load_models() -> type[Base]:
    """Import all feature models and return the shared declarative base."""
    from helperbuddy.features.reminders.models import Reminder  # noqa: F401
    from helperbuddy.features.users.models import User  # noqa: F401

    return Base


__all__ = ["load_models"]
