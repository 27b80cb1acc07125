"""
OpenRouteService provider implementation.

Directions, matrix and geocoding through the OpenRouteService REST API,
with POI search backed by the Overpass API.
"""

from .provider import OpenRouteServiceProvider

__all__ = ['OpenRouteServiceProvider']
