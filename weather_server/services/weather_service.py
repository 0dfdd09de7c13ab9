"""Weather lookup service: city name to current forecast via Open-Meteo."""

import logging
from typing import NoReturn, Optional

from fastapi import HTTPException, status

from weather_server.config import Settings
from weather_server.schemas.weather import Coordinates
from weather_server.services.upstream_client import (
    UpstreamClient,
    UpstreamError,
    UpstreamTimeout,
)
from weather_server.utils.json_fields import extract_number

logger = logging.getLogger(__name__)

CITY_NOT_FOUND = "City coordinates not found."


class WeatherService:
    """
    Service for the two-step weather lookup.

    Features:
    - Geocoding a city name to coordinates (first match only)
    - Fetching the current weather for those coordinates
    - Mapping each upstream outcome to an HTTP error
    """

    def __init__(self, settings: Settings, client: UpstreamClient):
        """
        Initialize weather service.

        Args:
            settings: Application settings
            client: Upstream client shared by all requests
        """
        self.settings = settings
        self.client = client

    async def get_forecast_for_city(self, city: str) -> str:
        """
        Resolve a city and return the raw forecast JSON for it.

        Args:
            city: City name as typed by the user

        Returns:
            Forecast body exactly as the upstream sent it

        Raises:
            HTTPException: 404 if the city cannot be located,
                502/504 if an upstream is unreachable
        """
        coordinates = await self.geocode_city(city)
        return await self.fetch_forecast(coordinates)

    async def geocode_city(self, city: str) -> Coordinates:
        """
        Convert a city name to coordinates.

        Args:
            city: City name, URL-encoded by the HTTP client

        Returns:
            Coordinates of the first geocoding match

        Raises:
            HTTPException: 404 if there is no usable match
        """
        logger.info(f"Geocoding city: {city}")

        try:
            body = await self.client.fetch(
                self.settings.geocoding_url,
                params={"name": city, "count": 1}
            )
        except UpstreamError as e:
            self._raise_upstream_error(e, "Geocoding", CITY_NOT_FOUND)

        if body is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=CITY_NOT_FOUND
            )

        latitude = extract_number(body, "latitude")
        longitude = extract_number(body, "longitude")
        if latitude is None or longitude is None:
            logger.info(f"No coordinates in geocoding response for: {city}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=CITY_NOT_FOUND
            )

        return Coordinates(latitude=latitude, longitude=longitude)

    async def fetch_forecast(self, coordinates: Coordinates) -> str:
        """
        Fetch the current weather for coordinates.

        With ``forecast_failure_passthrough`` enabled a failed call yields an
        empty body instead of an error.

        Args:
            coordinates: Location to look up

        Returns:
            Raw forecast JSON text

        Raises:
            HTTPException: 502/504 (or 404 when upstream errors are not
                separated) if the forecast cannot be fetched
        """
        logger.info(
            f"Fetching forecast for coordinates: "
            f"{coordinates.latitude}, {coordinates.longitude}"
        )

        error: Optional[UpstreamError] = None
        body: Optional[str] = None
        try:
            body = await self.client.fetch(
                self.settings.forecast_url,
                params={
                    "latitude": coordinates.latitude,
                    "longitude": coordinates.longitude,
                    "current_weather": "true",
                    "timezone": "auto"
                }
            )
        except UpstreamError as e:
            error = e

        if body is not None:
            return body

        if self.settings.forecast_failure_passthrough:
            logger.warning("Forecast lookup failed, passing through empty body")
            return ""

        if error is not None:
            self._raise_upstream_error(error, "Forecast", "Forecast not available.")

        if not self.settings.separate_upstream_errors:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Forecast not available."
            )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Forecast service error"
        )

    def _raise_upstream_error(
        self,
        error: UpstreamError,
        service_name: str,
        not_found_detail: str
    ) -> NoReturn:
        if not self.settings.separate_upstream_errors:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=not_found_detail
            ) from error
        if isinstance(error, UpstreamTimeout):
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail=f"{service_name} service timeout"
            ) from error
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{service_name} service unavailable"
        ) from error
