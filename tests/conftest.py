"""Pytest fixtures for the city weather API tests.

This module provides test fixtures that ensure:
1. No external API calls are made (the weather provider is served by
   an in-process httpx mock transport)
2. Each test gets its own SQLite database file
3. Isolated test environment with controlled configuration
"""

import os
from collections.abc import Callable, Iterator

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

# Set test environment BEFORE importing application modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-openweather-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "10")

from city_weather.api import create_app
from city_weather.api.routes.weather import get_weather_provider
from city_weather.config import get_settings
from city_weather.database.connection import get_db_session
from city_weather.providers.openweather import OpenWeatherProvider

COOKIE_NAME = "auth_token"


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database_url(tmp_path, monkeypatch) -> str:
    """Point the app at a fresh SQLite file and create tables on startup."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("DATABASE_CREATE_TABLES", "true")
    get_settings.cache_clear()
    return url


@pytest.fixture
def app(database_url) -> FastAPI:
    return create_app()


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    """Test client with the app lifespan (database) running."""
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Weather Provider Fixtures
# =============================================================================


@pytest.fixture
def mock_weather(app) -> Callable[[Callable[[httpx.Request], httpx.Response]], list]:
    """Serve weather lookups from a handler instead of the network.

    Returns a function that installs the handler and returns the list of
    requests the provider made.
    """
    requests: list[httpx.Request] = []

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> list:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        async def provider_override():
            async with OpenWeatherProvider(
                api_key="test-openweather-key",
                transport=httpx.MockTransport(recording_handler),
            ) as provider:
                yield provider

        app.dependency_overrides[get_weather_provider] = provider_override
        return requests

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def london_weather() -> dict:
    """Sample OpenWeatherMap current weather response."""
    return {
        "coord": {"lon": -0.1278, "lat": 51.5074},
        "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds"}],
        "main": {"temp": 15.5, "feels_like": 14.9, "humidity": 65},
        "wind": {"speed": 4.1, "deg": 260},
        "name": "London",
        "cod": 200,
    }


# =============================================================================
# Session Helpers
# =============================================================================


def register(client: TestClient, username: str, password: str = "secret1") -> str:
    """Register a user on a clean cookie jar and return their session token."""
    client.cookies.clear()
    response = client.post(
        "/api/auth/register", json={"username": username, "password": password}
    )
    assert response.status_code == 201, response.text
    token = client.cookies.get(COOKIE_NAME)
    assert token
    return token


def use_session(client: TestClient, token: str | None) -> None:
    """Replace the client's session cookie."""
    client.cookies.clear()
    if token is not None:
        client.cookies.set(COOKIE_NAME, token)


@pytest.fixture
def alice(client) -> str:
    return register(client, "alice")


@pytest.fixture
def bob(client) -> str:
    return register(client, "bob")


# =============================================================================
# Database Failure Fixtures
# =============================================================================


class UnavailableSession:
    """Database session stand-in whose every query fails."""

    @staticmethod
    def _fail():
        raise OperationalError("SELECT 1", {}, Exception("database is unavailable"))

    async def execute(self, *args, **kwargs):
        self._fail()

    async def get(self, *args, **kwargs):
        self._fail()

    async def commit(self):
        self._fail()

    def add(self, instance):
        pass

    async def rollback(self):
        pass


@pytest.fixture
def break_db(app) -> Iterator[Callable[[], None]]:
    """Returns a function that makes every later request see a failing store."""

    async def unavailable_session():
        yield UnavailableSession()

    def install() -> None:
        app.dependency_overrides[get_db_session] = unavailable_session

    yield install
    app.dependency_overrides.pop(get_db_session, None)
