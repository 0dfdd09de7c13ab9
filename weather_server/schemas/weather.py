"""Pydantic schemas for the weather lookup."""

from pydantic import BaseModel, Field, ConfigDict


class Coordinates(BaseModel):
    """Geographic coordinates resolved from a city name."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "latitude": 48.85341,
                "longitude": 2.3488
            }
        }
    )

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")


class ErrorResponse(BaseModel):
    """Error body returned by the API routes."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "detail": "City coordinates not found.",
                "error_code": "NOT_FOUND"
            }
        }
    )

    detail: str = Field(..., description="Human-readable error message")
    error_code: str = Field(..., description="Machine-readable error code")


class HealthStatus(BaseModel):
    """Health check payload."""

    status: str
    app_name: str
