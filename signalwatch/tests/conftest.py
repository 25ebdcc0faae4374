"""Pytest configuration and shared fixtures.

Database tests run against an in-memory SQLite database (aiosqlite). The
engine uses a StaticPool so every session of one test shares the same
connection and therefore the same database. Each test gets a fresh engine.

Fixtures:
    settings: Settings for tests with SMTP and RapidAPI configured
    engine / session_factory / session: Database access
    persist: Add instances to the session and flush them
    notifier: RecordingNotifier capturing email and SMS attempts
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from signalwatch.core.config import Settings, get_settings
from signalwatch.core.database import create_session_factory, create_tables
from signalwatch.services.notification import (
    NotificationChannel,
    NotificationDelivery,
    reset_notification_service,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None]:
    """Point settings at SQLite and clear cached singletons around each test."""
    original_db_url = os.environ.get("DATABASE_URL")
    os.environ["DATABASE_URL"] = TEST_DATABASE_URL
    get_settings.cache_clear()
    reset_notification_service()

    yield

    if original_db_url is None:
        os.environ.pop("DATABASE_URL", None)
    else:
        os.environ["DATABASE_URL"] = original_db_url
    get_settings.cache_clear()
    reset_notification_service()


@pytest.fixture
def settings(tmp_path: Any) -> Settings:
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        log_file_path=str(tmp_path / "logs" / "signalwatch.log"),
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="user@example.com",
        smtp_password="test-password",  # pragma: allowlist secret
        smtp_from_address="alerts@example.com",
        rapidapi_key="test-rapidapi-key",  # pragma: allowlist secret
    )


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def persist(session: AsyncSession):
    """Add instances to the session and flush, returning the first one."""

    async def _persist(*instances: Any) -> Any:
        session.add_all(instances)
        await session.flush()
        return instances[0]

    return _persist


class RecordingNotifier:
    """Stand-in for NotificationService that records every attempt.

    Set ``email_success`` to False to simulate SMTP failures.
    """

    def __init__(self, *, email_success: bool = True) -> None:
        self.email_success = email_success
        self.emails: list[tuple[str, str, str]] = []
        self.sms: list[tuple[str, str]] = []

    async def send_email(self, to: str, subject: str, body: str) -> NotificationDelivery:
        self.emails.append((to, subject, body))
        return NotificationDelivery(
            channel=NotificationChannel.EMAIL,
            success=self.email_success,
            error=None if self.email_success else "SMTP error: connection refused",
            recipient=to,
        )

    async def send_sms(self, phone: str, message: str) -> NotificationDelivery:
        self.sms.append((phone, message))
        return NotificationDelivery(channel=NotificationChannel.SMS, success=True, recipient=phone)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
