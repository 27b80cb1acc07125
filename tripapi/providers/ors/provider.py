"""
OpenRouteService provider implementation.

Uses the OpenRouteService v2 REST API:
- /v2/directions/{profile}/geojson for routes
- /v2/matrix/{profile} for duration/distance matrices
- /geocode/search for place name lookup

ORS does not reorder stops, so multi-stop routes are sequenced locally with
a nearest-neighbor pass over a duration matrix before asking for directions.
POI search is backed by the Overpass API (same OSM data ORS routes on).
"""

import logging
from typing import Any, Dict, List, Optional

from ..base import GeoProvider, ProviderType
from ..errors import NotFoundError, ProviderConfigError, UpstreamFailureError
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
    RouteWarning,
    TravelProfile,
)
from ..overpass import OverpassClient
from ..settings import ProviderSettings
from tripapi.services.poi_normalizer import build_overpass_query, normalize_elements
from tripapi.utils.sequencing import order_with_fixed_endpoints, tour_cost

logger = logging.getLogger(__name__)

PROVIDER_TAG = "openrouteservice"


class OpenRouteServiceProvider(GeoProvider):
    """
    OpenRouteService provider.

    Profiles are passed through unchanged: the abstract profile names are
    the ORS profile names.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://api.openrouteservice.org",
        overpass: Optional[OverpassClient] = None,
        timeout: float = 30.0,
        user_agent: str = "trip-planner/1.0",
        max_error_chars: int = 500,
    ):
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.overpass = overpass or OverpassClient(timeout=timeout, user_agent=user_agent)
        self.max_error_chars = max_error_chars

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> "OpenRouteServiceProvider":
        """Build a provider from application settings."""
        overpass = OverpassClient(
            endpoint=settings.overpass_endpoint,
            timeout=settings.http_timeout,
            user_agent=settings.http_user_agent,
            max_error_chars=settings.upstream_error_max_chars,
        )
        return cls(
            api_key=settings.ors_api_key,
            base_url=settings.ors_base_url,
            overpass=overpass,
            timeout=settings.http_timeout,
            user_agent=settings.http_user_agent,
            max_error_chars=settings.upstream_error_max_chars,
        )

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.OPENROUTESERVICE

    @property
    def is_configured(self) -> bool:
        """Check if the provider has an API key."""
        return bool(self.api_key)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ProviderConfigError(
                "OpenRouteService API key is not configured (ORS_API_KEY)",
                provider=PROVIDER_TAG,
            )
        return self.api_key

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        api_key = self._require_key()
        async with self._get_http_client() as client:
            return await request_json(
                client,
                "POST",
                f"{self.base_url}{path}",
                PROVIDER_TAG,
                self.max_error_chars,
                json=payload,
                headers={
                    "Authorization": api_key,
                    "Accept": "application/json, application/geo+json",
                },
            )

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        api_key = self._require_key()
        async with self._get_http_client() as client:
            return await request_json(
                client,
                "GET",
                f"{self.base_url}{path}",
                PROVIDER_TAG,
                self.max_error_chars,
                params={**params, "api_key": api_key},
            )

    # Routing

    async def compute_route(
        self,
        coords: List[Coordinate],
        profile: TravelProfile,
        options: Optional[RouteOptions] = None,
    ) -> RouteResult:
        """Calculate a route; stops beyond two are reordered with fixed endpoints."""
        options = options or RouteOptions()
        profile = TravelProfile(profile)

        waypoint_order = None
        ordered = list(coords)
        if len(coords) > 2:
            waypoint_order = await self._optimize_order(coords, profile)
            ordered = [coords[i] for i in waypoint_order]

        logger.info(
            f"🗺️ ORS route: {len(ordered)} stops, profile={profile.value}"
        )

        payload = self._build_directions_payload(ordered, options)
        data = await self._post(f"/v2/directions/{profile.value}/geojson", payload)

        result = self._parse_directions(data, options)
        result.waypoint_order = waypoint_order
        return result

    async def _optimize_order(self, coords: List[Coordinate], profile: TravelProfile) -> List[int]:
        matrix = await self.compute_matrix(coords, profile, [MatrixMetric.DURATION])
        durations = matrix.durations or []
        if len(durations) != len(coords):
            logger.warning("🗺️ ORS matrix size mismatch, keeping request order")
            return list(range(len(coords)))

        order = order_with_fixed_endpoints(durations)
        logger.debug(
            f"🗺️ Nearest-neighbor order {order}: "
            f"{tour_cost(durations, order):.0f}s vs {tour_cost(durations, range(len(coords))):.0f}s as given"
        )
        return order

    def _build_directions_payload(
        self, coords: List[Coordinate], options: RouteOptions
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "coordinates": [c.as_pair() for c in coords],
            "instructions": True,
            "units": "m",
        }
        if options.preference:
            payload["preference"] = options.preference
        if options.language:
            payload["language"] = options.language
        if options.avoid_features:
            payload["options"] = {"avoid_features": list(options.avoid_features)}
        if options.suppress_warnings:
            payload["suppress_warnings"] = True
        return payload

    def _parse_directions(self, data: Dict[str, Any], options: RouteOptions) -> RouteResult:
        features = data.get("features") or []
        if not features:
            raise NotFoundError("OpenRouteService could not calculate a route", provider=PROVIDER_TAG)

        feature = features[0]
        properties = feature.get("properties") or {}
        segments = properties.get("segments") or []
        summary = properties.get("summary") or {}

        if segments:
            distance = sum(float(s.get("distance") or 0) for s in segments)
            duration = sum(float(s.get("duration") or 0) for s in segments)
        else:
            distance = float(summary.get("distance") or 0)
            duration = float(summary.get("duration") or 0)

        instructions = [
            RouteInstruction(
                distance=float(step.get("distance") or 0),
                duration=float(step.get("duration") or 0),
                type=int(step.get("type") or 0),
                instruction=step.get("instruction") or "",
                name=step.get("name") if step.get("name") not in (None, "-") else None,
                way_points=list(step.get("way_points") or []),
            )
            for segment in segments
            for step in segment.get("steps") or []
        ]

        warnings = None
        if properties.get("warnings") and not options.suppress_warnings:
            warnings = [
                RouteWarning(code=int(w.get("code", 0)), message=str(w.get("message", "")))
                for w in properties["warnings"]
            ]

        geometry = feature.get("geometry") or {}
        return RouteResult(
            provider=PROVIDER_TAG,
            geometry=RouteGeometry(
                type=geometry.get("type", "LineString"),
                coordinates=geometry.get("coordinates") or [],
            ),
            distance=distance,
            duration=duration,
            summary=RouteSummary(distance=distance, duration=duration),
            instructions=instructions,
            warnings=warnings,
        )

    # Matrix

    async def compute_matrix(
        self,
        coords: List[Coordinate],
        profile: TravelProfile,
        metrics: List[MatrixMetric],
    ) -> MatrixResult:
        """All-pairs matrix; only requested metrics are asked for and returned."""
        profile = TravelProfile(profile)
        metric_names = [MatrixMetric(m).value for m in metrics]

        data = await self._post(
            f"/v2/matrix/{profile.value}",
            {"locations": [c.as_pair() for c in coords], "metrics": metric_names},
        )

        n = len(coords)
        durations = self._grid(data.get("durations"), n) if "duration" in metric_names else None
        distances = self._grid(data.get("distances"), n) if "distance" in metric_names else None

        return MatrixResult(
            provider=PROVIDER_TAG,
            durations=durations,
            distances=distances,
            metadata=MatrixMetadata(locations=n, profile=profile.value, metrics=metric_names),
        )

    @staticmethod
    def _grid(raw: Optional[List[List[Any]]], n: int) -> List[List[Optional[float]]]:
        """Copy an upstream grid into an n x n array, padding missing cells with None."""
        if raw is None:
            raise UpstreamFailureError(
                "OpenRouteService matrix response is missing a requested metric",
                provider=PROVIDER_TAG,
            )
        grid: List[List[Optional[float]]] = []
        for i in range(n):
            row = raw[i] if i < len(raw) and raw[i] is not None else []
            grid.append([
                float(row[j]) if j < len(row) and row[j] is not None else None
                for j in range(n)
            ])
        return grid

    # Geocoding and POIs

    async def geocode(self, query: str) -> Optional[Coordinate]:
        """Resolve a place name with the ORS (Pelias) geocoder."""
        data = await self._get("/geocode/search", {"text": query, "size": 1})
        features = data.get("features") or []
        if not features:
            logger.debug(f"📍 ORS geocode found nothing for '{query}'")
            return None

        lng, lat = features[0]["geometry"]["coordinates"][:2]
        return Coordinate(lng=lng, lat=lat)

    async def search_pois(
        self,
        center: Coordinate,
        radius: int,
        place_type: Optional[str] = None,
        keyword: Optional[str] = None,
        limit: int = 50,
    ) -> List[POI]:
        """
        Search POIs through Overpass.

        The tag predicate set is fixed, so ``place_type`` and ``keyword`` are
        not used.
        """
        query = build_overpass_query(center.lat, center.lng, radius, limit)
        elements = await self.overpass.fetch_elements(query)
        return normalize_elements(elements, limit)
