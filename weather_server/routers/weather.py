"""Weather API endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from weather_server.dependencies import get_weather_service
from weather_server.schemas.weather import ErrorResponse
from weather_server.services.weather_service import WeatherService
from weather_server.utils.query import parse_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/weather")

JSON_UTF8 = "application/json; charset=utf-8"

# Every method is routed here so non-GET requests get a 405 from this
# handler rather than falling through to the static assets mount.
OTHER_METHODS = ["HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
ALL_METHODS = ["GET"] + OTHER_METHODS


@router.get(
    "",
    summary="Current weather for a city",
    description="""
    Resolve a city name to coordinates with the Open-Meteo geocoding API,
    then return the Open-Meteo current-weather forecast for the first match.

    The forecast JSON is passed through unchanged.

    Only GET is supported.
    """,
    responses={
        200: {
            "description": "Forecast JSON from Open-Meteo",
            "content": {
                "application/json": {
                    "example": {
                        "latitude": 48.86,
                        "longitude": 2.3399997,
                        "timezone": "Europe/Paris",
                        "current_weather": {
                            "temperature": 20.1,
                            "windspeed": 9.4,
                            "weathercode": 3
                        }
                    }
                }
            }
        },
        400: {"model": ErrorResponse, "description": "City parameter missing or empty"},
        404: {"model": ErrorResponse, "description": "City coordinates not found"},
        405: {"model": ErrorResponse, "description": "Method other than GET"},
        502: {"model": ErrorResponse, "description": "Upstream service error"},
        504: {"model": ErrorResponse, "description": "Upstream service timeout"},
    }
)
@router.api_route("", methods=OTHER_METHODS, include_in_schema=False)
@router.api_route("/{subpath:path}", methods=ALL_METHODS, include_in_schema=False)
async def get_weather(
    request: Request,
    weather_service: WeatherService = Depends(get_weather_service)
) -> Response:
    """
    Return the current weather for the ``city`` query parameter.

    Args:
        request: Incoming request; the raw query string is parsed here
        weather_service: Weather service instance

    Returns:
        Response carrying the forecast JSON verbatim
    """
    if request.method != "GET":
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method Not Allowed. Only GET is supported.",
            headers={"Allow": "GET"}
        )

    city = parse_query(request.url.query).get("city")
    if city is None or not city.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="City parameter is missing or empty."
        )

    logger.info(f"Weather lookup for city: {city}")
    forecast = await weather_service.get_forecast_for_city(city)

    return Response(
        content=forecast,
        status_code=status.HTTP_200_OK,
        media_type=JSON_UTF8
    )
