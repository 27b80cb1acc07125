"""
POI normalization for Overpass elements and places search results.

Turns raw upstream payloads into the unified ``POI`` model:
coordinate resolution, category/name/kind derivation from OSM tags,
deduplication and result capping. Everything here is pure; the HTTP calls
live in the providers.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tripapi.providers.errors import BadRequestError
from tripapi.providers.models import POI, POICategory
from tripapi.utils.geo_utils import calculate_distance_meters, is_valid_coordinate

logger = logging.getLogger(__name__)

MIN_RADIUS_METERS = 100
MAX_RADIUS_METERS = 50000
DEFAULT_RADIUS_METERS = 3000
DEFAULT_POI_LIMIT = 50
UNNAMED_POI = "Unnamed POI"

# (element types, tag filter) pairs queried around the center point.
# Points get the full set; areas skip the dessert-cafe and confectionery filters.
_NODE_FILTERS = [
    '["amenity"="ice_cream"]',
    '["amenity"="cafe"]["cuisine"~"dessert|cake|pastry",i]',
    '["shop"="bakery"]',
    '["shop"="confectionery"]',
    '["historic"]',
    '["tourism"="attraction"]',
    '["tourism"="museum"]',
    '["amenity"="restaurant"]',
    '["amenity"="cafe"]',
    '["leisure"="park"]',
]
_WAY_FILTERS = [
    '["amenity"="ice_cream"]',
    '["shop"="bakery"]',
    '["historic"]',
    '["tourism"="attraction"]',
    '["tourism"="museum"]',
    '["amenity"="restaurant"]',
    '["amenity"="cafe"]',
    '["leisure"="park"]',
]

# Google place types by category, checked in this order.
_PLACE_TYPE_CATEGORIES: List[Tuple[POICategory, set]] = [
    (POICategory.FOOD, {"restaurant", "cafe", "bakery", "meal_takeaway", "meal_delivery", "food", "bar"}),
    (POICategory.HISTORIC, {"church", "mosque", "synagogue", "hindu_temple", "cemetery", "place_of_worship"}),
    (POICategory.TOURISM, {"tourist_attraction", "museum", "art_gallery", "zoo", "aquarium", "amusement_park"}),
    (POICategory.LEISURE, {"park", "stadium", "campground", "bowling_alley", "movie_theater", "night_club"}),
    (POICategory.SHOP, {"store", "shopping_mall", "clothing_store", "book_store", "supermarket", "jewelry_store"}),
]


def validate_radius(radius: int) -> int:
    """
    Check the search radius against the accepted range.

    Raises:
        BadRequestError: If radius is outside [100, 50000] meters
    """
    if radius < MIN_RADIUS_METERS or radius > MAX_RADIUS_METERS:
        raise BadRequestError(
            f"Radius must be between {MIN_RADIUS_METERS} and {MAX_RADIUS_METERS} meters"
        )
    return radius


def build_overpass_query(lat: float, lon: float, radius: int, limit: int = DEFAULT_POI_LIMIT) -> str:
    """Build the Overpass QL union of all tag predicates around a point."""
    around = f"(around:{radius},{lat},{lon})"

    query_parts = ["[out:json][timeout:25];", "("]
    for tag_filter in _NODE_FILTERS:
        query_parts.append(f"  node{tag_filter}{around};")
    for tag_filter in _WAY_FILTERS:
        query_parts.append(f"  way{tag_filter}{around};")
    query_parts.extend([");", f"out center {limit};"])

    return "\n".join(query_parts)


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def resolve_coordinate(element: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """
    Representative (lat, lon) of an Overpass element.

    Nodes carry lat/lon directly; ways and relations carry a ``center`` when
    queried with ``out center``. Returns None if nothing finite and in range
    can be resolved.
    """
    center = element.get("center") or {}
    lat = _as_float(element.get("lat"))
    if lat is None:
        lat = _as_float(center.get("lat"))
    lon = _as_float(element.get("lon"))
    if lon is None:
        lon = _as_float(center.get("lon"))

    if lat is None or lon is None or not is_valid_coordinate(lat, lon):
        return None
    return lat, lon


def derive_category(tags: Optional[Dict[str, str]]) -> POICategory:
    """
    Coarse category from OSM tags.

    Food indicators win over everything else, then historic, tourism,
    amenity, shop and leisure, in that order.
    """
    if not tags:
        return POICategory.OTHER

    if (
        tags.get("amenity") == "ice_cream"
        or tags.get("shop") == "bakery"
        or "dessert" in (tags.get("cuisine") or "")
    ):
        return POICategory.FOOD
    if tags.get("historic"):
        return POICategory.HISTORIC
    if tags.get("tourism"):
        return POICategory.TOURISM
    if tags.get("amenity"):
        return POICategory.AMENITY
    if tags.get("shop"):
        return POICategory.SHOP
    if tags.get("leisure"):
        return POICategory.LEISURE
    return POICategory.OTHER


def derive_name(tags: Optional[Dict[str, str]]) -> str:
    """Display name, falling back through the type tags to a placeholder."""
    tags = tags or {}
    if tags.get("name"):
        return tags["name"]
    if tags.get("shop"):
        return tags["shop"]
    if tags.get("amenity"):
        return tags["amenity"]
    if tags.get("historic"):
        return f"Historic {tags['historic']}"
    if tags.get("tourism"):
        return tags["tourism"]
    return UNNAMED_POI


def derive_kind(tags: Optional[Dict[str, str]]) -> str:
    """First present raw tag value among shop, amenity, historic, tourism, leisure."""
    tags = tags or {}
    for key in ("shop", "amenity", "historic", "tourism", "leisure"):
        if tags.get(key):
            return tags[key]
    return "unknown"


def normalize_element(element: Dict[str, Any]) -> Optional[POI]:
    """Convert one Overpass element into a POI, or None if it has no usable position."""
    position = resolve_coordinate(element)
    if position is None:
        return None

    lat, lon = position
    tags = element.get("tags") or {}

    return POI(
        id=f"osm-{element.get('type', 'node')}-{element.get('id')}",
        name=derive_name(tags),
        lat=lat,
        lon=lon,
        kind=derive_kind(tags),
        category=derive_category(tags),
    )


def _dedupe_and_cap(pois: Iterable[POI], limit: int) -> List[POI]:
    seen = set()
    result: List[POI] = []
    for poi in pois:
        if poi.id in seen:
            continue
        seen.add(poi.id)
        result.append(poi)
        if len(result) >= limit:
            break
    return result


def normalize_elements(elements: Iterable[Dict[str, Any]], limit: int = DEFAULT_POI_LIMIT) -> List[POI]:
    """
    Normalize a list of Overpass elements.

    Elements without a resolvable coordinate are dropped, duplicates (same
    type and id) are kept once and the result is capped at ``limit``.
    """
    elements = list(elements or [])
    pois = _dedupe_and_cap(
        (poi for poi in (normalize_element(el) for el in elements) if poi is not None),
        limit,
    )
    logger.debug(f"🔎 {len(pois)} POIs normalized from {len(elements)} Overpass elements")
    return pois


def category_from_place_types(types: Optional[List[str]]) -> POICategory:
    """Coarse category from Google place types."""
    types = set(types or [])
    for category, known in _PLACE_TYPE_CATEGORIES:
        if types & known:
            return category
    if types & {"point_of_interest", "establishment"}:
        return POICategory.AMENITY
    return POICategory.OTHER


def normalize_place(
    place: Dict[str, Any],
    center_lat: Optional[float] = None,
    center_lon: Optional[float] = None,
) -> Optional[POI]:
    """
    Convert a Google Places result into a POI.

    Returns None for results without a usable location.
    """
    location = (place.get("geometry") or {}).get("location") or {}
    lat = _as_float(location.get("lat"))
    lon = _as_float(location.get("lng"))
    if lat is None or lon is None or not is_valid_coordinate(lat, lon):
        return None

    types = place.get("types") or []
    distance = None
    if center_lat is not None and center_lon is not None:
        distance = calculate_distance_meters(center_lat, center_lon, lat, lon)

    rating = _as_float(place.get("rating"))

    return POI(
        id=f"google-{place.get('place_id')}",
        name=place.get("name") or UNNAMED_POI,
        lat=lat,
        lon=lon,
        kind=types[0] if types else "unknown",
        category=category_from_place_types(types),
        address=place.get("vicinity") or place.get("formatted_address"),
        rating=rating,
        types=types,
        distance=distance,
    )


def normalize_places(
    places: Iterable[Dict[str, Any]],
    limit: int,
    center_lat: Optional[float] = None,
    center_lon: Optional[float] = None,
) -> List[POI]:
    """Normalize places results, keeping upstream ranking, deduplicated by place id."""
    return _dedupe_and_cap(
        (
            poi
            for poi in (normalize_place(p, center_lat, center_lon) for p in (places or []))
            if poi is not None
        ),
        limit,
    )
