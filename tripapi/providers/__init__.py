"""
Multi-provider geographic data abstraction layer.

This module provides a unified interface for routing, distance matrices,
geocoding and POI search over OpenRouteService and Google Maps.

The architecture follows the Strategy pattern, allowing the application to switch between
different providers based on configuration or per request, while maintaining a
consistent result format for the callers.
"""

from .base import GeoProvider, ProviderType
from .errors import GeoAPIError
from .models import (
    Coordinate,
    MatrixMetric,
    MatrixResult,
    POI,
    POICategory,
    RouteOptions,
    RouteResult,
    TravelMode,
    TravelProfile,
)
from .manager import GeoProviderManager, create_provider, get_manager

__all__ = [
    'GeoProvider',
    'ProviderType',
    'GeoAPIError',
    'Coordinate',
    'MatrixMetric',
    'MatrixResult',
    'POI',
    'POICategory',
    'RouteOptions',
    'RouteResult',
    'TravelMode',
    'TravelProfile',
    'GeoProviderManager',
    'create_provider',
    'get_manager',
]
