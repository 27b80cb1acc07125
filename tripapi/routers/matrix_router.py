"""
Router for duration/distance matrices.

Endpoints:
- POST /matrix - All-pairs matrix for 2..25 locations
- GET /matrix - Service info
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response

from ..models.geo_models import MatrixRequest
from ..providers.models import MatrixMetric, MatrixResult, TravelProfile
from ..providers.settings import ProviderSettings
from .dependencies import ProviderFactory, get_app_settings, get_provider_factory
from .route_router import check_coordinates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Matrix"])

MATRIX_CACHE_CONTROL = "s-maxage=300, stale-while-revalidate=600"


@router.post("/matrix", response_model=MatrixResult)
async def calculate_matrix(
    request: MatrixRequest,
    response: Response,
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    settings: ProviderSettings = Depends(get_app_settings),
):
    """
    Calculate the duration and/or distance matrix between all locations.

    Metrics that were not requested are returned as null.
    """
    coords = check_coordinates(request.coords, settings.matrix_max_coordinates)
    metrics = list(dict.fromkeys(request.metrics))
    provider = provider_factory(request.provider)

    logger.info(
        f"📐 Matrix request: {len(coords)} locations, metrics={[m.value for m in metrics]}, "
        f"provider={provider.provider_type.value}"
    )
    result = await provider.compute_matrix(coords, request.profile, metrics)

    response.headers["Cache-Control"] = MATRIX_CACHE_CONTROL
    return result


@router.get("/matrix")
async def matrix_service_info(
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    settings: ProviderSettings = Depends(get_app_settings),
):
    """Health and capability info for the matrix service."""
    capabilities = {
        "maxLocations": settings.matrix_max_coordinates,
        "profiles": [p.value for p in TravelProfile],
        "metrics": [m.value for m in MatrixMetric],
    }
    return {
        "service": "Matrix API",
        "description": "Calculate duration/distance matrix between multiple points",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "google": {**capabilities, "configured": provider_factory("google").is_configured},
        "openrouteservice": {
            **capabilities,
            "configured": provider_factory("openrouteservice").is_configured,
        },
    }
