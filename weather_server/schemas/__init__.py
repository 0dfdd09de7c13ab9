"""Pydantic schemas for request/response validation."""
from weather_server.schemas.weather import Coordinates, ErrorResponse, HealthStatus

__all__ = [
    "Coordinates",
    "ErrorResponse",
    "HealthStatus",
]
