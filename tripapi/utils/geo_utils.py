"""
Geographic utility functions for coordinate validation and distances.

This module contains pure functions with no dependencies on providers or
services. Coordinates arriving from the HTTP layer are [lng, lat] pairs
(GeoJSON order).
"""

import math
from typing import Sequence


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Check a single latitude/longitude pair against WGS84 bounds."""
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def validate_coordinates(coords: Sequence[Sequence[float]]) -> bool:
    """
    Validate a list of [lng, lat] pairs.

    Args:
        coords: Coordinates in [lng, lat] order

    Returns:
        True if every pair has two members inside the world bounds
    """
    for pair in coords:
        if len(pair) != 2:
            return False
        lng, lat = pair
        if not is_valid_coordinate(lat, lng):
            return False
    return True


def calculate_distance_meters(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """
    Calculate the distance between two points using Haversine formula.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    # Earth radius in meters
    return 6371000 * c
