"""
Tests for the unified provider models.
"""

import pytest
from pydantic import ValidationError

from tripapi.providers.models import (
    Coordinate,
    POI,
    POICategory,
    RouteOptions,
    TravelMode,
    TravelProfile,
    profile_to_travel_mode,
)


class TestProfileToTravelMode:
    """Tests for the profile to travel mode mapping."""

    @pytest.mark.parametrize("profile,mode", [
        ("driving-car", TravelMode.DRIVING),
        ("driving-hgv", TravelMode.DRIVING),
        ("cycling-regular", TravelMode.BICYCLING),
        ("cycling-road", TravelMode.BICYCLING),
        ("cycling-mountain", TravelMode.BICYCLING),
        ("cycling-electric", TravelMode.BICYCLING),
        ("foot-walking", TravelMode.WALKING),
        ("foot-hiking", TravelMode.WALKING),
        ("wheelchair", TravelMode.WALKING),
    ])
    def test_known_profiles(self, profile, mode):
        """It should map every profile to its travel mode."""
        assert profile_to_travel_mode(profile) == mode

    def test_accepts_enum_members(self):
        """It should accept TravelProfile members as well as strings."""
        assert profile_to_travel_mode(TravelProfile.DRIVING_CAR) == TravelMode.DRIVING

    @pytest.mark.parametrize("profile", ["teleport", "", None, 42])
    def test_unknown_profiles_fall_back_to_walking(self, profile):
        """It should never fail and default to walking."""
        assert profile_to_travel_mode(profile) == TravelMode.WALKING


class TestCoordinate:
    """Tests for the Coordinate model."""

    def test_from_pair_uses_lng_lat_order(self):
        """It should read [lng, lat] pairs."""
        coord = Coordinate.from_pair([-9.14, 38.72])
        assert coord.lng == -9.14
        assert coord.lat == 38.72

    def test_as_lat_lng(self):
        """It should format as "lat,lng" for query strings."""
        assert Coordinate(lng=-9.14, lat=38.72).as_lat_lng() == "38.72,-9.14"

    def test_rejects_out_of_range(self):
        """It should reject a latitude beyond 90."""
        with pytest.raises(ValidationError):
            Coordinate(lng=0, lat=91)


class TestRouteOptions:
    """Tests for route options validation."""

    def test_defaults(self):
        """It should default to no preferences."""
        options = RouteOptions()
        assert options.avoid_features == []
        assert options.preference is None
        assert options.suppress_warnings is False

    def test_camel_case_alias(self):
        """It should accept suppressWarnings as sent by web clients."""
        assert RouteOptions(suppressWarnings=True).suppress_warnings is True
        assert RouteOptions(suppress_warnings=True).suppress_warnings is True

    def test_rejects_unknown_preference(self):
        """It should only accept fastest, shortest or recommended."""
        with pytest.raises(ValidationError):
            RouteOptions(preference="scenic")


class TestPOI:
    """Tests for the POI model."""

    def test_category_serializes_as_value(self):
        """It should store the category as its string value."""
        poi = POI(id="osm-node-1", name="Cafe", lat=1, lon=2, category=POICategory.FOOD)
        assert poi.model_dump()["category"] == "food"

    def test_rejects_empty_name(self):
        """It should require a non-empty name."""
        with pytest.raises(ValidationError):
            POI(id="osm-node-1", name="", lat=1, lon=2)
