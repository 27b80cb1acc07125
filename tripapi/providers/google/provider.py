"""
Google Maps provider implementation.

Uses the Google Maps Platform web services (JSON over HTTPS):
- Directions API, with waypoint optimization for multi-stop routes
- Distance Matrix API
- Geocoding API
- Places API (Legacy) Nearby Search
https://developers.google.com/maps/documentation

Google reports most failures with HTTP 200 and a ``status`` string, so both
the HTTP status and the body status are checked.
"""

import logging
from typing import Any, Dict, List, Optional

from ..base import GeoProvider, ProviderType
from ..errors import ProviderConfigError, classify_google_status, classify_upstream_error
from ..http import request_json
from ..models import (
    Coordinate,
    MatrixMetadata,
    MatrixMetric,
    MatrixResult,
    POI,
    RouteGeometry,
    RouteInstruction,
    RouteOptions,
    RouteResult,
    RouteSummary,
    TravelProfile,
    profile_to_travel_mode,
)
from ..settings import ProviderSettings
from tripapi.services.poi_normalizer import normalize_places
from tripapi.utils.polyline import to_geojson_linestring

logger = logging.getLogger(__name__)

PROVIDER_TAG = "google"

# Route option names (ORS style) to Google ``avoid`` values
AVOID_FEATURE_MAP = {
    "tollways": "tolls",
    "tolls": "tolls",
    "highways": "highways",
    "ferries": "ferries",
    "indoor": "indoor",
}

GOOGLE_NEARBY_MAX_RADIUS = 50000


class GoogleMapsProvider(GeoProvider):
    """
    Google Maps provider.

    Abstract profiles are mapped to Google travel modes with
    ``profile_to_travel_mode``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://maps.googleapis.com/maps/api",
        timeout: float = 30.0,
        user_agent: str = "trip-planner/1.0",
        max_error_chars: int = 500,
    ):
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_error_chars = max_error_chars

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> "GoogleMapsProvider":
        """Build a provider from application settings."""
        return cls(
            api_key=settings.google_maps_api_key,
            base_url=settings.google_maps_base_url,
            timeout=settings.http_timeout,
            user_agent=settings.http_user_agent,
            max_error_chars=settings.upstream_error_max_chars,
        )

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.GOOGLE

    @property
    def is_configured(self) -> bool:
        """Check if the provider has a valid API key."""
        return bool(self.api_key)

    async def _call(
        self,
        path: str,
        params: Dict[str, Any],
        allow_zero_results: bool = False,
    ) -> Dict[str, Any]:
        """
        GET a Google web service endpoint and check its body status.

        Args:
            path: Service path under the base URL (e.g. "/directions/json")
            params: Query parameters without the key
            allow_zero_results: Return the body instead of raising on ZERO_RESULTS
        """
        if not self.api_key:
            raise ProviderConfigError(
                "Google Maps API key is not configured (GOOGLE_MAPS_API_KEY)",
                provider=PROVIDER_TAG,
            )

        async with self._get_http_client() as client:
            data = await request_json(
                client,
                "GET",
                f"{self.base_url}{path}",
                PROVIDER_TAG,
                self.max_error_chars,
                params={**params, "key": self.api_key},
            )

        if not isinstance(data, dict):
            raise classify_upstream_error(502, data, PROVIDER_TAG, self.max_error_chars)

        status = data.get("status")
        if status == "OK" or (allow_zero_results and status == "ZERO_RESULTS"):
            return data

        logger.warning(f"Google Maps API status: {status} on {path}")
        raise classify_google_status(status, data, max_chars=self.max_error_chars)

    # Routing

    async def compute_route(
        self,
        coords: List[Coordinate],
        profile: TravelProfile,
        options: Optional[RouteOptions] = None,
    ) -> RouteResult:
        """Directions between the first and last stop, optimizing the stops in between."""
        options = options or RouteOptions()
        mode = profile_to_travel_mode(profile)

        origin, destination = coords[0], coords[-1]
        waypoints = coords[1:-1]

        params: Dict[str, Any] = {
            "origin": origin.as_lat_lng(),
            "destination": destination.as_lat_lng(),
            "mode": mode.value,
        }
        if waypoints:
            params["waypoints"] = "optimize:true|" + "|".join(w.as_lat_lng() for w in waypoints)

        avoid = [AVOID_FEATURE_MAP[f] for f in options.avoid_features if f in AVOID_FEATURE_MAP]
        if avoid:
            params["avoid"] = "|".join(dict.fromkeys(avoid))
        if options.language:
            params["language"] = options.language

        logger.info(f"🗺️ Google route: {len(coords)} stops, mode={mode.value}")

        data = await self._call("/directions/json", params)
        return self._parse_directions(data, len(waypoints))

    def _parse_directions(self, data: Dict[str, Any], waypoint_count: int) -> RouteResult:
        route = data["routes"][0]
        legs = route.get("legs") or []

        distance = float(sum((leg.get("distance") or {}).get("value", 0) for leg in legs))
        duration = float(sum((leg.get("duration") or {}).get("value", 0) for leg in legs))

        instructions: List[RouteInstruction] = []
        step_index = 0
        for leg in legs:
            for step in leg.get("steps") or []:
                instructions.append(RouteInstruction(
                    distance=float((step.get("distance") or {}).get("value", 0)),
                    duration=float((step.get("duration") or {}).get("value", 0)),
                    type=0,
                    instruction=step.get("html_instructions") or "",
                    way_points=[step_index, step_index + 1],
                ))
                step_index += 1

        waypoint_order = None
        if waypoint_count:
            # Google indexes the intermediate waypoints only; shift to request indices
            inner = route.get("waypoint_order") or list(range(waypoint_count))
            waypoint_order = [0] + [i + 1 for i in inner] + [waypoint_count + 1]

        encoded = (route.get("overview_polyline") or {}).get("points", "")
        geometry = to_geojson_linestring(encoded)

        return RouteResult(
            provider=PROVIDER_TAG,
            geometry=RouteGeometry(**geometry),
            distance=distance,
            duration=duration,
            summary=RouteSummary(distance=distance, duration=duration),
            instructions=instructions,
            waypoint_order=waypoint_order,
        )

    # Matrix

    async def compute_matrix(
        self,
        coords: List[Coordinate],
        profile: TravelProfile,
        metrics: List[MatrixMetric],
    ) -> MatrixResult:
        """All-pairs matrix from a single Distance Matrix request."""
        mode = profile_to_travel_mode(profile)
        metric_names = [MatrixMetric(m).value for m in metrics]
        points = "|".join(c.as_lat_lng() for c in coords)

        data = await self._call(
            "/distancematrix/json",
            {"origins": points, "destinations": points, "mode": mode.value},
        )

        n = len(coords)
        durations: List[List[Optional[float]]] = [[None] * n for _ in range(n)]
        distances: List[List[Optional[float]]] = [[None] * n for _ in range(n)]

        for i, row in enumerate((data.get("rows") or [])[:n]):
            for j, element in enumerate((row.get("elements") or [])[:n]):
                if element.get("status", "OK") != "OK":
                    continue
                if element.get("duration") is not None:
                    durations[i][j] = float(element["duration"]["value"])
                if element.get("distance") is not None:
                    distances[i][j] = float(element["distance"]["value"])

        return MatrixResult(
            provider=PROVIDER_TAG,
            durations=durations if "duration" in metric_names else None,
            distances=distances if "distance" in metric_names else None,
            metadata=MatrixMetadata(
                locations=n,
                profile=TravelProfile(profile).value,
                metrics=metric_names,
            ),
        )

    # Geocoding and POIs

    async def geocode(self, query: str) -> Optional[Coordinate]:
        """Resolve a place name with the Geocoding API."""
        data = await self._call("/geocode/json", {"address": query}, allow_zero_results=True)
        results = data.get("results") or []
        if not results:
            logger.debug(f"📍 Google geocode found nothing for '{query}'")
            return None

        location = results[0]["geometry"]["location"]
        return Coordinate(lng=location["lng"], lat=location["lat"])

    async def search_pois(
        self,
        center: Coordinate,
        radius: int,
        place_type: Optional[str] = None,
        keyword: Optional[str] = None,
        limit: int = 50,
    ) -> List[POI]:
        """Nearby Search ranked by prominence, normalized to POIs."""
        params: Dict[str, Any] = {
            "location": center.as_lat_lng(),
            "radius": int(min(radius, GOOGLE_NEARBY_MAX_RADIUS)),
            "rankby": "prominence",
        }
        if place_type:
            params["type"] = place_type
        if keyword:
            params["keyword"] = keyword

        data = await self._call("/place/nearbysearch/json", params, allow_zero_results=True)
        places = data.get("results") or []

        pois = normalize_places(places, limit, center.lat, center.lng)
        logger.debug(
            f"Google Places found {len(pois)} POIs near ({center.lat}, {center.lng})"
        )
        return pois
