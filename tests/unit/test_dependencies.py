"""Unit tests for the shared outbound client and dependency providers."""

import pytest

from weather_server import dependencies, main
from weather_server.config import Settings
from weather_server.dependencies import (
    close_http_client,
    get_http_client,
    get_upstream_client,
)


@pytest.fixture
def fresh_http_client(monkeypatch):
    """Start each test without a shared client."""
    monkeypatch.setattr(dependencies, "_http_client", None)


class TestSharedHttpClient:
    """Test the process-wide outbound HTTP client lifecycle."""

    @pytest.mark.asyncio
    async def test_lifespan_reuses_and_closes_client(self, fresh_http_client) -> None:
        """Test that one client serves all calls and is closed on shutdown."""
        async with main.app.router.lifespan_context(main.app):
            first = get_http_client()
            second = get_http_client()

            assert first is second
            assert not first.is_closed

        assert first.is_closed
        assert dependencies._http_client is None

    @pytest.mark.asyncio
    async def test_closed_client_is_recreated(self, fresh_http_client) -> None:
        """Test that a client closed on shutdown is replaced on next use."""
        first = get_http_client()
        await close_http_client()

        second = get_http_client()

        assert second is not first
        assert not second.is_closed
        await close_http_client()

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self, fresh_http_client) -> None:
        """Test that shutdown before any request does nothing."""
        await close_http_client()

        assert dependencies._http_client is None

    @pytest.mark.asyncio
    async def test_client_uses_given_settings(self, fresh_http_client, clean_env) -> None:
        """Test that a new client is configured from the settings passed in."""
        app_settings = Settings()
        app_settings.app_name = "Weather Kiosk"
        app_settings.upstream_timeout = 2.5

        client = get_http_client(app_settings)

        assert client.headers["User-Agent"] == "Weather Kiosk/0.1"
        assert client.timeout.read == 2.5
        assert client.follow_redirects is False
        await close_http_client()


class TestUpstreamClientDependency:
    """Test the upstream client provider."""

    @pytest.mark.asyncio
    async def test_wraps_shared_client_with_settings_timeout(
        self,
        fresh_http_client,
        clean_env
    ) -> None:
        """Test that the provider uses the shared client and the configured timeout."""
        app_settings = Settings()
        app_settings.upstream_timeout = 1.5

        upstream_client = get_upstream_client(app_settings)

        assert upstream_client.http_client is get_http_client()
        assert upstream_client.timeout == 1.5
        await close_http_client()
