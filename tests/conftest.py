"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests off real SMTP/Twilio and the scheduler
    - Database Fixtures: per-test SQLite file, engine, session factory, session
    - Data Fixtures: a stored user and a reminder factory
    - Application Fixtures: FastAPI app wired to the test database and HTTP client
    - Channel Fixtures: recording stand-ins for the email and SMS senders

When adding new features:
    1. Add fixtures to the appropriate section below
    2. Keep fixtures function-scoped unless they are expensive and immutable
    3. Make fixtures composable (fixtures can depend on other fixtures)
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
import os
from typing import TYPE_CHECKING, Any

from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from helperbuddy.features.reminders.models import Reminder
    from helperbuddy.features.users.models import User

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("APP_TIMEZONE", "Asia/Kolkata")
os.environ.setdefault("DB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("REMINDER_SCHEDULER_ENABLED", "false")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("TWILIO_BACKEND", "console")
os.environ.setdefault("LOG_FILE_ENABLED", "false")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Fresh SQLite database with every table created.

    A file is used instead of ``:memory:`` so that the separate sessions
    opened by the dispatcher see the same data.
    """
    from helperbuddy.core.models import load_models

    base = load_models()
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'helperbuddy-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's AsyncSessionLocal."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Database session for arranging and asserting test data.

    Example:
        async def test_create_user(db_session):
            db_session.add(User(name="Asha", email="asha@example.com"))
            await db_session.commit()
    """
    async with session_factory() as session:
        yield session


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    """A stored user with both default contact channels."""
    from helperbuddy.features.users.models import User

    account = User(name="Asha Rao", email="asha@example.com", phone="+919800000001")
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    from helperbuddy.features.users.models import User

    account = User(name="Vikram Shah", email="vikram@example.com", phone=None)
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


@pytest.fixture
def make_reminder(
    db_session: AsyncSession,
    user: User,
) -> Callable[..., Awaitable[Reminder]]:
    """Factory that persists a reminder owned by ``user``.

    Example:
        reminder = await make_reminder(scheduled_time=now, reminder_type=ReminderType.SMS)
    """
    from helperbuddy.features.reminders.models import Reminder, ReminderStatus, ReminderType

    async def _make(**overrides: Any) -> Reminder:
        values: dict[str, Any] = {
            "owner_id": user.id,
            "title": "Pay rent",
            "message": "Transfer to landlord",
            "reminder_type": ReminderType.EMAIL,
            "scheduled_time": datetime.now(UTC) + timedelta(hours=1),
            "is_recurring": False,
            "recurring_pattern": None,
            "status": ReminderStatus.PENDING,
            "recipient_email": user.email,
            "recipient_phone": user.phone,
        }
        values.update(overrides)
        reminder = Reminder(**values)
        db_session.add(reminder)
        await db_session.commit()
        await db_session.refresh(reminder)
        return reminder

    return _make


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """FastAPI application whose request sessions come from the test database."""
    from helperbuddy.app.main import create_app
    from helperbuddy.core.dependencies.database import get_db_session

    application = create_app()

    async def _test_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _test_session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app without a network socket.

    Example:
        async def test_health_check(client):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """Headers the auth gateway would forward for ``user``."""
    return {"X-User-Id": str(user.id)}


# ============================================================================
# Channel Fixtures
# ============================================================================


@dataclass
class RecordingEmailSender:
    """Email sender stand-in that records calls and returns a fixed result."""

    result: bool = True
    error: Exception | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def send_reminder(
        self,
        recipient: str | None,
        title: str,
        message: str,
        scheduled_time: datetime,
    ) -> bool:
        self.calls.append(
            {"recipient": recipient, "title": title, "message": message, "scheduled_time": scheduled_time}
        )
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class RecordingSmsSender:
    """SMS sender stand-in that records calls and returns a fixed result."""

    result: bool = True
    error: Exception | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def send_reminder(self, recipient: str | None, title: str, message: str) -> bool:
        self.calls.append({"recipient": recipient, "title": title, "message": message})
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()
