"""
Request and response bodies of the geo endpoints.

Provider-facing result models live in ``tripapi.providers.models``; the
classes here only describe what crosses the HTTP boundary.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, conlist

from tripapi.providers.models import (
    DEFAULT_PROFILE,
    MatrixMetric,
    POI,
    RouteOptions,
    TravelProfile,
)

# A [lng, lat] pair; ranges are checked by the routers
LngLatPair = conlist(float, min_length=2, max_length=2)


class RouteRequest(BaseModel):
    coords: List[LngLatPair] = Field(
        ...,
        min_length=2,
        description="Stops as [lng, lat] pairs. First is the origin, last the destination"
    )
    profile: TravelProfile = Field(DEFAULT_PROFILE, description="Travel profile")
    options: Optional[RouteOptions] = Field(None, description="Routing preferences")
    provider: Optional[str] = Field(
        None,
        description="Provider to use (google, openrouteservice). Defaults to GEO_PRIMARY_PROVIDER"
    )


class MatrixRequest(BaseModel):
    coords: List[LngLatPair] = Field(
        ...,
        min_length=2,
        description="Locations as [lng, lat] pairs, used as sources and destinations"
    )
    profile: TravelProfile = Field(DEFAULT_PROFILE, description="Travel profile")
    metrics: List[MatrixMetric] = Field(
        default_factory=lambda: [MatrixMetric.DURATION],
        min_length=1,
        description="Metrics to compute"
    )
    provider: Optional[str] = Field(None, description="Provider to use")


class SearchCenter(BaseModel):
    lat: float
    lon: float


class POISearchMetadata(BaseModel):
    count: int = Field(..., description="Number of POIs returned")
    center: SearchCenter
    radius: int = Field(..., description="Search radius in meters")
    source: str = Field(..., description="Data source (overpass, google, openrouteservice)")


class POIListResponse(BaseModel):
    pois: List[POI]
    metadata: POISearchMetadata
