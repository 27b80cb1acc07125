"""
Router for POI searches.

Endpoints:
- GET /pois-overpass - OSM POIs around a coordinate
- GET /poi - Provider places around a coordinate or inside a city
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.geo_models import POIListResponse, POISearchMetadata, SearchCenter
from ..providers.errors import BadRequestError
from ..providers.settings import ProviderSettings
from ..services.poi_normalizer import DEFAULT_RADIUS_METERS
from ..services.poi_search_service import POISearchService
from .dependencies import (
    ProviderFactory,
    get_app_settings,
    get_poi_search_service,
    get_provider_factory,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["POI"])


@router.get("/pois-overpass", response_model=POIListResponse)
async def search_pois_overpass(
    lat: Optional[float] = Query(None, description="Latitude of the search center"),
    lon: Optional[float] = Query(None, description="Longitude of the search center"),
    radius: int = Query(DEFAULT_RADIUS_METERS, description="Search radius in meters (100-50000)"),
    service: POISearchService = Depends(get_poi_search_service),
    settings: ProviderSettings = Depends(get_app_settings),
):
    """
    Search OpenStreetMap POIs (food, historic, tourism, parks) around a point.
    """
    if lat is None or lon is None:
        raise BadRequestError("Missing required parameters: lat and lon")

    pois = await service.search_overpass(lat, lon, radius, limit=settings.poi_max_results)

    return POIListResponse(
        pois=pois,
        metadata=POISearchMetadata(
            count=len(pois),
            center=SearchCenter(lat=lat, lon=lon),
            radius=radius,
            source="overpass",
        ),
    )


@router.get("/poi", response_model=POIListResponse, response_model_exclude_none=True)
async def search_places(
    city: Optional[str] = Query(None, description="City to search in (geocoded first)"),
    lat: Optional[float] = Query(None, description="Latitude of the search center"),
    lon: Optional[float] = Query(None, description="Longitude of the search center"),
    type: str = Query("tourist_attraction", description="Place type filter"),
    keyword: Optional[str] = Query(None, description="Free text filter"),
    limit: int = Query(5, ge=1, le=20, description="Maximum number of places (1-20)"),
    radius: Optional[int] = Query(None, description="Search radius in meters (default 3000, 10000 for cities)"),
    provider: str = Query("google", description="Provider to use (google, openrouteservice)"),
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    service: POISearchService = Depends(get_poi_search_service),
):
    """
    Search popular places around a coordinate or inside a city.
    """
    geo_provider = provider_factory(provider)

    center, used_radius, pois = await service.search_places(
        geo_provider,
        city=city,
        lat=lat,
        lon=lon,
        place_type=type,
        keyword=keyword,
        limit=limit,
        radius=radius,
    )

    return POIListResponse(
        pois=pois,
        metadata=POISearchMetadata(
            count=len(pois),
            center=SearchCenter(lat=center.lat, lon=center.lng),
            radius=used_radius,
            source=geo_provider.provider_type.value,
        ),
    )
