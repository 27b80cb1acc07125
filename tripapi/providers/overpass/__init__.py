"""
OpenStreetMap Overpass API access.

Raw tagged elements are fetched here and normalized by
``tripapi.services.poi_normalizer``.
"""

from .client import OverpassClient

__all__ = ['OverpassClient']
