"""Google Maps provider for directions, distance matrix, geocoding and places."""

from .provider import GoogleMapsProvider

__all__ = ["GoogleMapsProvider"]
