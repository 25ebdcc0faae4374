"""Fixtures for API integration tests.

The application runs in-process through httpx's ASGITransport. The lifespan
is not started, so the database, settings, notifier and place provider are
all supplied through dependency overrides.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from signalwatch.api.dependencies import get_notification_service_dep, get_places_client_dep
from signalwatch.core.config import Settings, get_settings
from signalwatch.core.database import get_db
from signalwatch.main import app
from signalwatch.services.places_client import PlacesClient


class PlacesProvider:
    """Programmable stand-in for the place search provider."""

    def __init__(self) -> None:
        self.payload: dict[str, Any] = {"status": "ZERO_RESULTS", "candidates": []}
        self.status_code = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def places_provider() -> PlacesProvider:
    return PlacesProvider()


@pytest.fixture
def seed(session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., Any]:
    """Commit instances in their own session so request sessions can see them."""

    async def _seed(*instances: Any) -> None:
        async with session_factory() as session:
            session.add_all(instances)
            await session.commit()

    return _seed


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    notifier: Any,
    places_provider: PlacesProvider,
) -> AsyncGenerator[AsyncClient]:
    places_client = PlacesClient(settings, transport=httpx.MockTransport(places_provider))

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notification_service_dep] = lambda: notifier
    app.dependency_overrides[get_places_client_dep] = lambda: places_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await places_client.close()
