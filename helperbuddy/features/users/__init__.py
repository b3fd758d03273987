"""Users feature: profiles and the default-contact directory."""

from __future__ import annotations

from .directory import ContactInfo, UserDirectory
from .models import User
from .repository import UserRepository, get_user_repository

__all__ = [
    "ContactInfo",
    "User",
    "UserDirectory",
    "UserRepository",
    "get_user_repository",
]
