"""
Base interfaces and abstract classes for geographic data providers.

This module defines the core contract that every routing/matrix/POI provider
must implement, ensuring a consistent API across provider implementations.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

import httpx

from .models import (
    Coordinate,
    MatrixMetric,
    MatrixResult,
    POI,
    RouteOptions,
    RouteResult,
    TravelProfile,
)


class ProviderType(str, Enum):
    """Supported geographic data providers."""
    OPENROUTESERVICE = "openrouteservice"
    GOOGLE = "google"


class GeoProvider(ABC):
    """
    Abstract base class for geographic data providers.

    All providers must implement this interface. Implementations receive
    already validated input (coordinate counts and ranges, profile and
    metrics) and return the unified result models.
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = "trip-planner/1.0"):
        self.timeout = timeout
        self.user_agent = user_agent

    def _get_http_client(self) -> httpx.AsyncClient:
        """
        Create a new HTTP client for the current request.

        Used as an async context manager so the connection pool is closed
        when the request finishes.
        """
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"User-Agent": self.user_agent},
        )

    @abstractmethod
    async def compute_route(
        self,
        coords: List[Coordinate],
        profile: TravelProfile,
        options: Optional[RouteOptions] = None,
    ) -> RouteResult:
        """
        Calculate a route through the given coordinates.

        With two coordinates this is a plain origin-destination route. With
        more, the first coordinate is the origin, the last the destination and
        the intermediate stops may be reordered; the chosen order is reported
        in ``RouteResult.waypoint_order``.

        Args:
            coords: Ordered stops (2 or more)
            profile: Abstract travel profile
            options: Optional routing preferences

        Returns:
            Normalized RouteResult

        Raises:
            GeoAPIError: On any upstream failure
        """

    @abstractmethod
    async def compute_matrix(
        self,
        coords: List[Coordinate],
        profile: TravelProfile,
        metrics: List[MatrixMetric],
    ) -> MatrixResult:
        """
        Calculate an all-pairs matrix between the given coordinates.

        Args:
            coords: Locations used as both sources and destinations
            profile: Abstract travel profile
            metrics: Requested metrics; the others come back as None

        Returns:
            Normalized MatrixResult sized len(coords) x len(coords)
        """

    @abstractmethod
    async def geocode(self, query: str) -> Optional[Coordinate]:
        """
        Resolve a free-form place name (usually a city) to a coordinate.

        Returns:
            Coordinate, or None if the place could not be found
        """

    @abstractmethod
    async def search_pois(
        self,
        center: Coordinate,
        radius: int,
        place_type: Optional[str] = None,
        keyword: Optional[str] = None,
        limit: int = 50,
    ) -> List[POI]:
        """
        Search for Points of Interest around a location.

        Args:
            center: Center point for the search
            radius: Search radius in meters
            place_type: Provider place type filter, if supported
            keyword: Free text filter, if supported
            limit: Maximum number of results to return

        Returns:
            Deduplicated list of POIs, at most ``limit`` long
        """

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Return the provider type identifier."""

    @property
    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs."""
        return True
