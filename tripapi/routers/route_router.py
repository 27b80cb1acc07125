"""
Router for route calculation.

Endpoints:
- POST /route - Route through 2..50 stops, reordering intermediate stops
- GET /route - Service info with the supported profiles per provider
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from fastapi import APIRouter, Depends, Query

from ..models.geo_models import RouteRequest
from ..providers.base import ProviderType
from ..providers.errors import BadRequestError
from ..providers.models import Coordinate, RouteResult, TravelProfile, profile_to_travel_mode
from ..providers.settings import ProviderSettings
from ..utils.geo_utils import validate_coordinates
from .dependencies import ProviderFactory, get_app_settings, get_provider_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Route"])

INVALID_COORDINATES_MESSAGE = (
    "Invalid coordinates. Longitude must be between -180 and 180, latitude between -90 and 90"
)


def check_coordinates(coords: Sequence[Sequence[float]], max_count: int) -> List[Coordinate]:
    """
    Validate request coordinates and convert them to Coordinate models.

    Raises:
        BadRequestError: On too many coordinates or out-of-range values
    """
    if len(coords) > max_count:
        raise BadRequestError(
            "Invalid request data",
            details=[{"field": "coords", "message": f"Maximum {max_count} coordinates allowed"}],
        )
    if not validate_coordinates(coords):
        raise BadRequestError(INVALID_COORDINATES_MESSAGE)
    return [Coordinate.from_pair(pair) for pair in coords]


@router.post("/route", response_model=RouteResult, response_model_exclude_none=True)
async def calculate_route(
    request: RouteRequest,
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    settings: ProviderSettings = Depends(get_app_settings),
):
    """
    Calculate a route through the given stops.

    The first coordinate is the origin and the last the destination. With
    more than two coordinates the stops in between may be reordered; the
    chosen order is returned in ``waypoint_order``.
    """
    coords = check_coordinates(request.coords, settings.route_max_coordinates)
    provider = provider_factory(request.provider)

    logger.info(
        f"🗺️ Route request: {len(coords)} stops, profile={request.profile.value}, "
        f"provider={provider.provider_type.value}"
    )
    return await provider.compute_route(coords, request.profile, request.options)


def _profiles_info() -> Dict[str, Any]:
    return {
        ProviderType.OPENROUTESERVICE.value: {
            "profiles": [p.value for p in TravelProfile],
        },
        ProviderType.GOOGLE.value: {
            "profiles": [p.value for p in TravelProfile],
            "modes": {p.value: profile_to_travel_mode(p).value for p in TravelProfile},
        },
    }


@router.get("/route")
async def route_service_info(
    provider: str = Query("all", description="Provider to describe (all, google, openrouteservice)"),
    provider_factory: ProviderFactory = Depends(get_provider_factory),
):
    """Health and capability info for the route service."""
    result: Dict[str, Any] = {
        "service": "Route API",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    for name, info in _profiles_info().items():
        if provider in ("all", name):
            result[name] = {**info, "configured": provider_factory(name).is_configured}
    return result
