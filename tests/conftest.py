"""
Pytest configuration and shared fixtures.

This module provides common fixtures for all tests: sample coordinates,
an in-memory provider, environment overrides and a fake upstream HTTP
server built on ``httpx.MockTransport``.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tripapi.providers.base import GeoProvider, ProviderType
from tripapi.providers.models import (
    Coordinate,
    MatrixMetadata,
    MatrixMetric,
    MatrixResult,
    POI,
    POICategory,
    RouteGeometry,
    RouteInstruction,
    RouteResult,
    RouteSummary,
    TravelProfile,
)


@pytest.fixture
def sample_coords():
    """Provide a few stops in Lisbon as Coordinate models."""
    return [
        Coordinate(lng=-9.1393, lat=38.7223),  # Baixa
        Coordinate(lng=-9.1604, lat=38.6916),  # Belem
        Coordinate(lng=-9.1335, lat=38.7139),  # Castelo
        Coordinate(lng=-9.1427, lat=38.7369),  # Saldanha
    ]


@pytest.fixture
def sample_pois():
    """Provide sample POIs for testing."""
    return [
        POI(
            id="osm-node-1",
            name="Pasteis de Belem",
            lat=38.6975,
            lon=-9.2032,
            kind="bakery",
            category=POICategory.FOOD,
        ),
        POI(
            id="osm-way-2",
            name="Mosteiro dos Jeronimos",
            lat=38.6979,
            lon=-9.2068,
            kind="monastery",
            category=POICategory.HISTORIC,
        ),
    ]


class MockGeoProvider(GeoProvider):
    """In-memory provider recording its calls."""

    def __init__(self, provider_type: ProviderType = ProviderType.GOOGLE):
        super().__init__()
        self._provider_type = provider_type
        self.calls: List[tuple] = []
        self.route_result: Optional[RouteResult] = None
        self.geocode_results: Dict[str, Coordinate] = {}
        self.poi_results: List[POI] = []
        self.error: Optional[Exception] = None

    def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def compute_route(self, coords, profile, options=None):
        self._record("compute_route", coords, profile, options)
        if self.route_result is not None:
            return self.route_result
        return RouteResult(
            provider=self._provider_type.value,
            geometry=RouteGeometry(coordinates=[c.as_pair() for c in coords]),
            distance=1500.0,
            duration=1200.0,
            summary=RouteSummary(distance=1500.0, duration=1200.0),
            instructions=[
                RouteInstruction(distance=1500.0, duration=1200.0, instruction="Head north", way_points=[0, 1]),
            ],
        )

    async def compute_matrix(self, coords, profile, metrics):
        self._record("compute_matrix", coords, profile, metrics)
        n = len(coords)
        names = [MatrixMetric(m).value for m in metrics]
        grid = [[float(abs(i - j) * 60) for j in range(n)] for i in range(n)]
        return MatrixResult(
            provider=self._provider_type.value,
            durations=grid if "duration" in names else None,
            distances=[[v * 10 for v in row] for row in grid] if "distance" in names else None,
            metadata=MatrixMetadata(locations=n, profile=TravelProfile(profile).value, metrics=names),
        )

    async def geocode(self, query):
        self._record("geocode", query)
        return self.geocode_results.get(query)

    async def search_pois(self, center, radius, place_type=None, keyword=None, limit=50):
        self._record("search_pois", center, radius, place_type, keyword, limit)
        return self.poi_results[:limit]

    @property
    def provider_type(self):
        return self._provider_type


@pytest.fixture
def mock_provider():
    """Create a mock provider for testing."""
    return MockGeoProvider()


class FakeUpstream:
    """
    Fake upstream HTTP server for ``httpx.MockTransport``.

    Answers requests from a table of (method, path suffix) routes and keeps
    every request it receives for assertions.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: List[tuple] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status_code: int = 200,
        text: Optional[str] = None,
        exc: Optional[Exception] = None,
    ):
        self._routes.append((method.upper(), path, status_code, json, text, exc))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, path, status_code, body, text, exc in self._routes:
            if request.method == method and request.url.path.endswith(path):
                if exc is not None:
                    raise exc
                if text is not None:
                    return httpx.Response(status_code, text=text)
                return httpx.Response(status_code, json=body)
        return httpx.Response(599, text=f"no fake route for {request.method} {request.url.path}")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_upstream():
    return FakeUpstream()


@pytest.fixture
def mock_env_vars():
    """Mock environment variables for testing."""
    from tripapi.providers.manager import reset_manager
    from tripapi.providers.settings import reset_settings

    original_values = {}
    test_values = {
        'GEO_PRIMARY_PROVIDER': 'openrouteservice',
        'ORS_API_KEY': 'test_ors_key',
        'GOOGLE_MAPS_API_KEY': 'test_google_key',
        'HTTP_TIMEOUT': '5',
        'UPSTREAM_ERROR_MAX_CHARS': '40',
    }

    for key, value in test_values.items():
        original_values[key] = os.getenv(key)
        os.environ[key] = value

    reset_settings()
    reset_manager()

    yield test_values

    for key, original_value in original_values.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value

    reset_settings()
    reset_manager()
