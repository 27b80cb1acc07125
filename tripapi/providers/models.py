"""
Unified data models for routing, matrix and POI data across all providers.

These models provide a consistent interface regardless of the underlying
provider (OpenRouteService, Google Maps, Overpass). All provider-specific
payloads are normalized to these models before leaving the provider layer.

Units are always meters and seconds.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class TravelProfile(str, Enum):
    """Abstract travel profiles accepted from callers (OpenRouteService naming)."""
    DRIVING_CAR = "driving-car"
    DRIVING_HGV = "driving-hgv"
    CYCLING_REGULAR = "cycling-regular"
    CYCLING_ROAD = "cycling-road"
    CYCLING_MOUNTAIN = "cycling-mountain"
    CYCLING_ELECTRIC = "cycling-electric"
    FOOT_WALKING = "foot-walking"
    FOOT_HIKING = "foot-hiking"
    WHEELCHAIR = "wheelchair"


DEFAULT_PROFILE = TravelProfile.FOOT_WALKING


class TravelMode(str, Enum):
    """Provider-side travel modes (Google Maps naming)."""
    DRIVING = "driving"
    BICYCLING = "bicycling"
    WALKING = "walking"


_PROFILE_TO_MODE = {
    TravelProfile.DRIVING_CAR: TravelMode.DRIVING,
    TravelProfile.DRIVING_HGV: TravelMode.DRIVING,
    TravelProfile.CYCLING_REGULAR: TravelMode.BICYCLING,
    TravelProfile.CYCLING_ROAD: TravelMode.BICYCLING,
    TravelProfile.CYCLING_MOUNTAIN: TravelMode.BICYCLING,
    TravelProfile.CYCLING_ELECTRIC: TravelMode.BICYCLING,
    TravelProfile.FOOT_WALKING: TravelMode.WALKING,
    TravelProfile.FOOT_HIKING: TravelMode.WALKING,
    TravelProfile.WHEELCHAIR: TravelMode.WALKING,
}


def profile_to_travel_mode(profile: Any) -> TravelMode:
    """
    Map an abstract profile to a provider travel mode.

    Total over any input: unknown values fall back to walking.
    """
    try:
        return _PROFILE_TO_MODE[TravelProfile(profile)]
    except (ValueError, TypeError):
        return TravelMode.WALKING


class MatrixMetric(str, Enum):
    """Metrics that can be requested from a matrix computation."""
    DURATION = "duration"
    DISTANCE = "distance"


class POICategory(str, Enum):
    """Coarse POI categories derived from provider tags."""
    FOOD = "food"
    HISTORIC = "historic"
    TOURISM = "tourism"
    AMENITY = "amenity"
    SHOP = "shop"
    LEISURE = "leisure"
    OTHER = "other"


class Coordinate(BaseModel):
    """A WGS84 position. Built from [lng, lat] pairs coming from the API."""
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")

    model_config = {"frozen": True}

    @classmethod
    def from_pair(cls, pair) -> "Coordinate":
        """Create from a [lng, lat] pair."""
        lng, lat = pair
        return cls(lng=lng, lat=lat)

    def as_lat_lng(self) -> str:
        """Format as "lat,lng", the order Google expects in query strings."""
        return f"{self.lat},{self.lng}"

    def as_pair(self) -> List[float]:
        return [self.lng, self.lat]


class RouteOptions(BaseModel):
    """
    Optional routing preferences.

    Validated once at the HTTP boundary and handed to the provider as is.
    Providers ignore options they cannot express.
    """
    avoid_features: List[str] = Field(
        default_factory=list,
        description="Features to avoid (e.g. tollways, highways, ferries)"
    )
    preference: Optional[str] = Field(
        None,
        pattern="^(fastest|shortest|recommended)$",
        description="Routing preference"
    )
    language: Optional[str] = Field(None, description="Language for instructions")
    suppress_warnings: bool = Field(
        False,
        alias="suppressWarnings",
        description="Drop provider warnings from the result"
    )

    model_config = {"populate_by_name": True}


class RouteGeometry(BaseModel):
    """GeoJSON LineString with [lng, lat] coordinates."""
    type: str = "LineString"
    coordinates: List[List[float]] = Field(default_factory=list)


class RouteInstruction(BaseModel):
    """A single navigation step."""
    distance: float = Field(..., ge=0, description="Step distance in meters")
    duration: float = Field(..., ge=0, description="Step duration in seconds")
    type: int = Field(0, description="Provider maneuver type (0 when unknown)")
    instruction: str = Field("", description="Human readable instruction")
    name: Optional[str] = Field(None, description="Street name")
    way_points: List[int] = Field(default_factory=list)


class RouteSummary(BaseModel):
    distance: float = Field(..., ge=0)
    duration: float = Field(..., ge=0)


class RouteWarning(BaseModel):
    code: int
    message: str


class RouteResult(BaseModel):
    """
    Normalized route across providers.

    ``distance`` and ``duration`` are summed across all legs.
    ``waypoint_order`` holds indices into the request coordinates when the
    provider reordered intermediate stops.
    """
    provider: str
    geometry: RouteGeometry
    distance: float = Field(..., ge=0, description="Total distance in meters")
    duration: float = Field(..., ge=0, description="Total duration in seconds")
    summary: RouteSummary
    instructions: List[RouteInstruction] = Field(default_factory=list)
    waypoint_order: Optional[List[int]] = None
    warnings: Optional[List[RouteWarning]] = None


class MatrixMetadata(BaseModel):
    locations: int
    profile: str
    metrics: List[str]


class MatrixResult(BaseModel):
    """
    Normalized duration/distance matrix.

    Unrequested metrics are None (serialized as null, never omitted).
    Cells without a route are None.
    """
    provider: str
    durations: Optional[List[List[Optional[float]]]] = None
    distances: Optional[List[List[Optional[float]]]] = None
    metadata: MatrixMetadata


class POI(BaseModel):
    """
    Unified Point of Interest.

    Every POI has in-range coordinates and a non-empty name.
    """
    id: str = Field(..., description="Provider-qualified identifier")
    name: str = Field(..., min_length=1, description="Display name")
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    kind: str = Field("unknown", description="Raw provider tag or type value")
    category: POICategory = Field(POICategory.OTHER)
    address: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    types: Optional[List[str]] = None
    distance: Optional[float] = Field(None, ge=0, description="Meters from the search center")

    model_config = {"use_enum_values": True}

