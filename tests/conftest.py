"""Shared test fixtures and configuration."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Callable, Generator, List, Optional

import httpx
import pytest

# Set TESTING flag to prevent loading .env file
os.environ['TESTING'] = '1'

# Set up test environment BEFORE any imports
os.environ['STATIC_DIR'] = tempfile.mkdtemp(prefix="weather-static-")
os.environ.pop('DEBUG', None)

from weather_server.config import Settings
from weather_server.services.upstream_client import UpstreamClient


GEOCODE_PARIS = {
    "results": [
        {
            "id": 2988507,
            "name": "Paris",
            "latitude": 48.85341,
            "longitude": 2.3488,
            "country_code": "FR",
            "timezone": "Europe/Paris"
        }
    ],
    "generationtime_ms": 0.5
}

FORECAST_PARIS = {
    "latitude": 48.86,
    "longitude": 2.3399997,
    "timezone": "Europe/Paris",
    "current_weather": {
        "temperature": 20.1,
        "windspeed": 9.4,
        "winddirection": 250,
        "weathercode": 3,
        "time": "2024-06-01T12:00"
    }
}

Handler = Callable[[httpx.Request], httpx.Response]


class FakeOpenMeteo:
    """
    Programmable stand-in for the geocoding and forecast APIs.

    Requests are routed on URL path; each side answers through a
    replaceable handler and every request is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.geocode_handler: Handler = lambda request: httpx.Response(200, json=GEOCODE_PARIS)
        self.forecast_handler: Handler = lambda request: httpx.Response(200, json=FORECAST_PARIS)
        self.calls: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if request.url.path.endswith("/search"):
            return self.geocode_handler(request)
        if request.url.path.endswith("/forecast"):
            return self.forecast_handler(request)
        return httpx.Response(404, text="unknown upstream path")

    def geocode_returns(self, status_code: int = 200, body: Optional[str] = None) -> None:
        text = body if body is not None else json.dumps(GEOCODE_PARIS)
        self.geocode_handler = lambda request: httpx.Response(status_code, text=text)

    def forecast_returns(self, status_code: int = 200, body: Optional[str] = None) -> None:
        text = body if body is not None else json.dumps(FORECAST_PARIS)
        self.forecast_handler = lambda request: httpx.Response(status_code, text=text)

    def calls_to(self, suffix: str) -> List[httpx.Request]:
        return [call for call in self.calls if call.url.path.endswith(suffix)]


@pytest.fixture(autouse=True)
def setup_test_env() -> Generator[None, None, None]:
    """Set up test environment variables before each test."""
    original_env = os.environ.copy()

    # Set TESTING flag
    os.environ['TESTING'] = '1'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment for tests that need to test defaults."""
    original_env = os.environ.copy()

    # Clear all environment variables except TESTING
    os.environ.clear()
    os.environ['TESTING'] = '1'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def upstream() -> FakeOpenMeteo:
    """Provide a fake Open-Meteo backend."""
    return FakeOpenMeteo()


@pytest.fixture
def test_settings() -> Settings:
    """Provide settings for a single test; tests may mutate them."""
    return Settings()


@pytest.fixture
async def upstream_client(
    upstream: FakeOpenMeteo,
    test_settings: Settings
) -> AsyncGenerator[UpstreamClient, None]:
    """Provide an upstream client wired to the fake backend."""
    async with httpx.AsyncClient(transport=upstream.transport) as http_client:
        yield UpstreamClient(http_client, test_settings.upstream_timeout)


@pytest.fixture
def static_dir() -> Generator[Path, None, None]:
    """Provide the static directory mounted by the application, emptied afterwards."""
    from weather_server.main import static_path

    yield static_path

    for child in static_path.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest.fixture
async def async_client(
    upstream_client: UpstreamClient,
    test_settings: Settings
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create test client with settings and upstream overrides."""
    from httpx import AsyncClient, ASGITransport
    from weather_server.main import app
    from weather_server.dependencies import get_settings, get_upstream_client

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_upstream_client] = lambda: upstream_client

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
