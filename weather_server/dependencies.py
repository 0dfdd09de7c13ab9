"""FastAPI dependencies for configuration and upstream access."""
import logging
from typing import Optional

import httpx
from fastapi import Depends

from weather_server.config import Settings
from weather_server.services.upstream_client import UpstreamClient
from weather_server.services.weather_service import WeatherService

logger = logging.getLogger(__name__)


# Initialize settings
settings = Settings()


# Shared outbound HTTP client singleton
_http_client: Optional[httpx.AsyncClient] = None


def get_settings() -> Settings:
    """
    Dependency to get application settings.

    Returns:
        Settings: Process-wide settings instance
    """
    return settings


def get_http_client(app_settings: Optional[Settings] = None) -> httpx.AsyncClient:
    """
    Get the process-wide outbound HTTP client, creating it on first use.

    Args:
        app_settings: Settings used to configure a newly created client,
            defaults to the process-wide settings

    Returns:
        httpx.AsyncClient: Client shared by all requests
    """
    global _http_client

    if app_settings is None:
        app_settings = settings

    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            timeout=app_settings.upstream_timeout,
            follow_redirects=False,
            headers={"User-Agent": f"{app_settings.app_name}/0.1"}
        )
        logger.info("Outbound HTTP client initialized")

    return _http_client


async def close_http_client() -> None:
    """Close the shared outbound HTTP client if it was created."""
    global _http_client

    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
        logger.info("Outbound HTTP client closed")


def get_upstream_client(
    app_settings: Settings = Depends(get_settings)
) -> UpstreamClient:
    """
    Dependency to get the upstream client.

    Args:
        app_settings: Application settings

    Returns:
        UpstreamClient: Client wrapping the shared HTTP client
    """
    return UpstreamClient(get_http_client(app_settings), app_settings.upstream_timeout)


def get_weather_service(
    app_settings: Settings = Depends(get_settings),
    client: UpstreamClient = Depends(get_upstream_client)
) -> WeatherService:
    """
    Dependency to get weather service instance.

    Args:
        app_settings: Application settings
        client: Upstream client

    Returns:
        WeatherService: Configured weather service
    """
    return WeatherService(app_settings, client)
