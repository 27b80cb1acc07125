"""
Configuration settings for the geo provider layer using Pydantic Settings.

This module centralizes all configuration for routing, matrix and POI
providers, using Pydantic Settings for validation and type safety.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class ProviderSettings(BaseSettings):
    """
    Settings for geographic data providers.

    Uses Pydantic Settings to load and validate configuration from
    environment variables with proper type checking and defaults.
    """

    # Primary provider configuration
    geo_primary_provider: str = Field(
        default="google",
        alias="GEO_PRIMARY_PROVIDER",
        description="Provider used when a request does not name one (google, openrouteservice)"
    )

    # OpenRouteService settings
    ors_api_key: Optional[str] = Field(
        default=None,
        alias="ORS_API_KEY",
        description="OpenRouteService API key"
    )
    ors_base_url: str = Field(
        default="https://api.openrouteservice.org",
        alias="ORS_BASE_URL",
        description="OpenRouteService base URL"
    )

    # Google Maps settings
    google_maps_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_MAPS_API_KEY", "NEXT_PUBLIC_GOOGLE_MAPS_API_KEY"),
        description="Google Maps Platform API key (Directions, Distance Matrix, Geocoding, Places)"
    )
    google_maps_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api",
        alias="GOOGLE_MAPS_BASE_URL",
        description="Google Maps web services base URL"
    )

    # Overpass settings
    overpass_endpoint: str = Field(
        default="https://overpass-api.de/api/interpreter",
        alias="OVERPASS_ENDPOINT",
        description="OpenStreetMap Overpass API endpoint"
    )

    # HTTP behaviour
    http_timeout: float = Field(
        default=30.0,
        alias="HTTP_TIMEOUT",
        description="Timeout in seconds for upstream requests"
    )
    http_user_agent: str = Field(
        default="trip-planner/1.0",
        alias="HTTP_USER_AGENT",
        description="User agent sent to upstream services"
    )
    upstream_error_max_chars: int = Field(
        default=500,
        alias="UPSTREAM_ERROR_MAX_CHARS",
        description="Maximum upstream body length kept in error details"
    )

    # Request limits
    route_max_coordinates: int = Field(
        default=50,
        alias="ROUTE_MAX_COORDINATES",
        description="Maximum number of coordinates in a route request"
    )
    matrix_max_coordinates: int = Field(
        default=25,
        alias="MATRIX_MAX_COORDINATES",
        description="Maximum number of coordinates in a matrix request"
    )
    poi_max_results: int = Field(
        default=50,
        alias="POI_MAX_RESULTS",
        description="Cap on POIs returned by the Overpass search"
    )

    # API server configuration
    tripapi_host: str = Field(
        default="127.0.0.1",
        alias="TRIPAPI_HOST",
        description="API server host"
    )
    tripapi_port: int = Field(
        default=8000,
        alias="TRIPAPI_PORT",
        description="API server port"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def get_api_key(self, provider: str) -> Optional[str]:
        """Get the API key for a provider name, None if not configured."""
        keys = {
            "openrouteservice": self.ors_api_key,
            "google": self.google_maps_api_key,
        }
        return keys.get(provider.lower())


# Global settings instance
_settings: Optional[ProviderSettings] = None


def get_settings() -> ProviderSettings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Validated ProviderSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ProviderSettings()
    return _settings


def reset_settings() -> None:
    """Reset global settings (useful for testing)."""
    global _settings
    _settings = None
