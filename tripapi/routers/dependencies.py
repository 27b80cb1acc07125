"""
FastAPI dependencies shared by the geo routers.

Tests replace these through ``app.dependency_overrides``.
"""

from typing import Callable, Optional

from tripapi.providers.base import GeoProvider
from tripapi.providers.manager import create_provider
from tripapi.providers.overpass import OverpassClient
from tripapi.providers.settings import ProviderSettings, get_settings
from tripapi.services.poi_search_service import POISearchService

ProviderFactory = Callable[[Optional[str]], GeoProvider]


def get_app_settings() -> ProviderSettings:
    return get_settings()


def get_provider_factory() -> ProviderFactory:
    """Return the callable that resolves a provider name (None for the default)."""
    return create_provider


def get_poi_search_service() -> POISearchService:
    settings = get_settings()
    overpass = OverpassClient(
        endpoint=settings.overpass_endpoint,
        timeout=settings.http_timeout,
        user_agent=settings.http_user_agent,
        max_error_chars=settings.upstream_error_max_chars,
    )
    return POISearchService(overpass=overpass)
