"""
POI Search Service - finding points of interest around a location.

This service handles:
- Overpass searches around a coordinate (OSM tags, fixed predicate set)
- Provider place searches around a coordinate or inside a named city
"""

import logging
import time
from typing import List, Optional, Tuple

from tripapi.providers.base import GeoProvider
from tripapi.providers.errors import BadRequestError, NotFoundError
from tripapi.providers.models import Coordinate, POI
from tripapi.providers.overpass import OverpassClient
from tripapi.services.poi_normalizer import (
    DEFAULT_POI_LIMIT,
    build_overpass_query,
    normalize_elements,
    validate_radius,
)
from tripapi.utils.geo_utils import is_valid_coordinate

logger = logging.getLogger(__name__)

CITY_SEARCH_RADIUS_METERS = 10000
POINT_SEARCH_RADIUS_METERS = 3000

INVALID_CENTER_MESSAGE = (
    "Invalid coordinates. Latitude must be between -90 and 90, longitude between -180 and 180"
)


class POISearchService:
    """
    Service for POI lookups used by the ``/pois-overpass`` and ``/poi`` endpoints.

    The Overpass client is injected so tests can point it at a fake transport.
    """

    def __init__(self, overpass: Optional[OverpassClient] = None):
        self.overpass = overpass or OverpassClient()

    async def search_overpass(
        self,
        lat: float,
        lon: float,
        radius: int,
        limit: int = DEFAULT_POI_LIMIT,
    ) -> List[POI]:
        """
        Search OSM POIs around a point.

        Args:
            lat: Center latitude
            lon: Center longitude
            radius: Search radius in meters, [100, 50000]
            limit: Maximum number of POIs returned

        Raises:
            BadRequestError: On invalid center or radius
            GeoAPIError: On Overpass failures
        """
        if not is_valid_coordinate(lat, lon):
            raise BadRequestError(INVALID_CENTER_MESSAGE)
        validate_radius(radius)

        start = time.time()
        query = build_overpass_query(lat, lon, radius, limit)
        elements = await self.overpass.fetch_elements(query)
        pois = normalize_elements(elements, limit)

        logger.info(
            f"🔎 Overpass search ({lat:.5f}, {lon:.5f}) r={radius}m: "
            f"{len(pois)} POIs in {time.time() - start:.2f}s"
        )
        return pois

    async def search_places(
        self,
        provider: GeoProvider,
        city: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        place_type: Optional[str] = None,
        keyword: Optional[str] = None,
        limit: int = 5,
        radius: Optional[int] = None,
    ) -> Tuple[Coordinate, int, List[POI]]:
        """
        Search popular places with a provider.

        With ``city`` the city is geocoded first and searched with a 10 km
        radius unless one is given; otherwise ``lat`` and ``lon`` are required.

        Returns:
            (search center, radius used, POIs)

        Raises:
            BadRequestError: If neither a city nor a valid coordinate is given
            NotFoundError: If the city cannot be geocoded
        """
        if city:
            center = await provider.geocode(city)
            if center is None:
                raise NotFoundError(f"City '{city}' not found", provider=provider.provider_type.value)
            search_radius = radius if radius is not None else CITY_SEARCH_RADIUS_METERS
            logger.info(f"📍 Geocoded '{city}' to ({center.lat:.5f}, {center.lng:.5f})")
        else:
            if lat is None or lon is None:
                raise BadRequestError("Either city or lat/lon parameters are required")
            if not is_valid_coordinate(lat, lon):
                raise BadRequestError(INVALID_CENTER_MESSAGE)
            center = Coordinate(lng=lon, lat=lat)
            search_radius = radius if radius is not None else POINT_SEARCH_RADIUS_METERS

        validate_radius(search_radius)

        pois = await provider.search_pois(
            center,
            search_radius,
            place_type=place_type,
            keyword=keyword,
            limit=limit,
        )
        logger.info(
            f"🔎 {provider.provider_type.value} place search: {len(pois)} POIs "
            f"(type={place_type}, keyword={keyword})"
        )
        return center, search_radius, pois
