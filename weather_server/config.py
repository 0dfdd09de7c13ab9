"""Application configuration using Pydantic Settings."""

import os
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = Field(
        default="Weather Insights API",
        description="Application name"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (exposes exception details in 500 responses)"
    )
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Comma-separated list of allowed CORS origins"
    )

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Server host"
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port"
    )

    # Upstream Configuration
    geocoding_url: str = Field(
        default="https://geocoding-api.open-meteo.com/v1/search",
        description="Open-Meteo geocoding search endpoint"
    )
    forecast_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        description="Open-Meteo forecast endpoint"
    )
    upstream_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=60.0,
        description="Timeout in seconds for each upstream request"
    )
    separate_upstream_errors: bool = Field(
        default=True,
        description="Report unreachable upstreams as 502/504 instead of 404"
    )
    forecast_failure_passthrough: bool = Field(
        default=False,
        description="Answer 200 with an empty body when the forecast call fails"
    )

    # Static Asset Configuration
    static_dir: str = Field(
        default="frontend",
        description="Directory containing the prebuilt frontend assets"
    )
    index_document: str = Field(
        default="index.html",
        description="Fallback document served for unknown paths"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("TESTING") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("geocoding_url", "forecast_url")
    @classmethod
    def validate_upstream_url(cls, v: str) -> str:
        """Validate that upstream URLs use http or https."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "Upstream URLs must start with http:// or https://"
            )
        return v.rstrip("/")

    @field_validator("index_document")
    @classmethod
    def validate_index_document(cls, v: str) -> str:
        """Validate that the index document is a plain file name."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(
                "INDEX_DOCUMENT must be a file name inside STATIC_DIR"
            )
        return v

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]
