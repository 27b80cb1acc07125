"""
Tests for the POI normalizer.

Covers the Overpass query builder, coordinate resolution, the
category/name/kind derivations and list normalization for both Overpass
elements and places results.
"""

import pytest

from tripapi.providers.errors import BadRequestError
from tripapi.providers.models import POICategory
from tripapi.services.poi_normalizer import (
    build_overpass_query,
    category_from_place_types,
    derive_category,
    derive_kind,
    derive_name,
    normalize_element,
    normalize_elements,
    normalize_place,
    resolve_coordinate,
    validate_radius,
)


class TestValidateRadius:
    """Tests for radius bounds."""

    @pytest.mark.parametrize("radius", [100, 3000, 50000])
    def test_accepts_bounds(self, radius):
        """It should accept radii between 100 and 50000 inclusive."""
        assert validate_radius(radius) == radius

    @pytest.mark.parametrize("radius", [99, 0, -5, 50001])
    def test_rejects_outside_bounds(self, radius):
        """It should reject radii outside the bounds."""
        with pytest.raises(BadRequestError) as exc_info:
            validate_radius(radius)
        assert exc_info.value.message == "Radius must be between 100 and 50000 meters"


class TestBuildOverpassQuery:
    """Tests for the Overpass QL builder."""

    def test_query_structure(self):
        """It should build a JSON union query with a result cap."""
        query = build_overpass_query(38.7, -9.1, 3000)

        assert query.startswith("[out:json][timeout:25];")
        assert query.rstrip().endswith("out center 50;")
        assert 'node["amenity"="ice_cream"](around:3000,38.7,-9.1);' in query
        assert 'node["amenity"="cafe"]["cuisine"~"dessert|cake|pastry",i](around:3000,38.7,-9.1);' in query
        assert 'way["leisure"="park"](around:3000,38.7,-9.1);' in query

    def test_ways_skip_confectionery(self):
        """It should only query confectionery shops as nodes."""
        query = build_overpass_query(0, 0, 100)

        assert 'node["shop"="confectionery"]' in query
        assert 'way["shop"="confectionery"]' not in query
        assert query.count("node[") == 10
        assert query.count("way[") == 8

    def test_custom_limit(self):
        """It should honour the result limit."""
        assert "out center 10;" in build_overpass_query(0, 0, 100, limit=10)


class TestResolveCoordinate:
    """Tests for element coordinate resolution."""

    def test_node_coordinates(self):
        """It should use lat/lon on nodes."""
        assert resolve_coordinate({"lat": 38.7, "lon": -9.1}) == (38.7, -9.1)

    def test_way_center(self):
        """It should fall back to the center for ways."""
        assert resolve_coordinate({"center": {"lat": 38.7, "lon": -9.1}}) == (38.7, -9.1)

    def test_zero_is_a_valid_coordinate(self):
        """It should keep points on the equator or the prime meridian."""
        assert resolve_coordinate({"lat": 0, "lon": 0}) == (0.0, 0.0)

    @pytest.mark.parametrize("element", [
        {},
        {"lat": 38.7},
        {"lat": "north", "lon": -9.1},
        {"lat": float("nan"), "lon": -9.1},
        {"lat": 95, "lon": -9.1},
    ])
    def test_unresolvable(self, element):
        """It should return None without a finite in-range position."""
        assert resolve_coordinate(element) is None


class TestDeriveCategory:
    """Tests for category precedence."""

    @pytest.mark.parametrize("tags,category", [
        ({"amenity": "ice_cream", "tourism": "attraction"}, POICategory.FOOD),
        ({"shop": "bakery", "historic": "building"}, POICategory.FOOD),
        ({"amenity": "cafe", "cuisine": "dessert;coffee"}, POICategory.FOOD),
        ({"historic": "monument", "tourism": "attraction"}, POICategory.HISTORIC),
        ({"tourism": "museum", "amenity": "toilets"}, POICategory.TOURISM),
        ({"amenity": "restaurant"}, POICategory.AMENITY),
        ({"shop": "confectionery", "leisure": "park"}, POICategory.SHOP),
        ({"leisure": "park"}, POICategory.LEISURE),
        ({"name": "Somewhere"}, POICategory.OTHER),
        ({}, POICategory.OTHER),
        (None, POICategory.OTHER),
    ])
    def test_precedence(self, tags, category):
        """It should apply the first matching rule."""
        assert derive_category(tags) == category


class TestDeriveNameAndKind:
    """Tests for display name and kind fallbacks."""

    @pytest.mark.parametrize("tags,name", [
        ({"name": "Santini", "amenity": "ice_cream"}, "Santini"),
        ({"shop": "bakery", "amenity": "cafe"}, "bakery"),
        ({"amenity": "cafe"}, "cafe"),
        ({"historic": "castle"}, "Historic castle"),
        ({"tourism": "viewpoint"}, "viewpoint"),
        ({"leisure": "park"}, "Unnamed POI"),
        ({"name": ""}, "Unnamed POI"),
        (None, "Unnamed POI"),
    ])
    def test_name(self, tags, name):
        """It should fall back through the type tags."""
        assert derive_name(tags) == name

    @pytest.mark.parametrize("tags,kind", [
        ({"shop": "bakery", "amenity": "cafe"}, "bakery"),
        ({"amenity": "cafe", "historic": "yes"}, "cafe"),
        ({"leisure": "park"}, "park"),
        ({"name": "x"}, "unknown"),
    ])
    def test_kind(self, tags, kind):
        """It should take the first raw tag value present."""
        assert derive_kind(tags) == kind


class TestNormalizeElements:
    """Tests for Overpass element normalization."""

    def test_ice_cream_with_tourism_is_food(self):
        """It should classify an ice cream attraction as food."""
        poi = normalize_element({
            "type": "node",
            "id": 42,
            "lat": 38.7,
            "lon": -9.1,
            "tags": {"amenity": "ice_cream", "tourism": "attraction", "name": "Gelato"},
        })

        assert poi.id == "osm-node-42"
        assert poi.category == "food"
        assert poi.kind == "ice_cream"
        assert poi.name == "Gelato"

    def test_drops_unresolvable_and_duplicates(self):
        """It should drop elements without coordinates and keep duplicates once."""
        elements = [
            {"type": "node", "id": 1, "lat": 1.0, "lon": 1.0, "tags": {"amenity": "cafe"}},
            {"type": "node", "id": 1, "lat": 1.0, "lon": 1.0, "tags": {"amenity": "cafe"}},
            {"type": "way", "id": 1, "center": {"lat": 1.1, "lon": 1.1}, "tags": {"leisure": "park"}},
            {"type": "way", "id": 3, "tags": {"historic": "ruins"}},
        ]

        pois = normalize_elements(elements)

        assert [p.id for p in pois] == ["osm-node-1", "osm-way-1"]

    def test_caps_results(self):
        """It should return at most the limit."""
        elements = [
            {"type": "node", "id": i, "lat": 1.0, "lon": 1.0, "tags": {"amenity": "cafe"}}
            for i in range(120)
        ]

        assert len(normalize_elements(elements)) == 50
        assert len(normalize_elements(elements, limit=5)) == 5

    def test_empty_input(self):
        """It should handle missing elements."""
        assert normalize_elements([]) == []
        assert normalize_elements(None) == []


class TestNormalizePlaces:
    """Tests for Google places normalization."""

    def test_place(self):
        """It should map a place result to a POI."""
        poi = normalize_place({
            "place_id": "xyz",
            "name": "Oceanario",
            "geometry": {"location": {"lat": 38.7635, "lng": -9.0937}},
            "types": ["aquarium", "tourist_attraction"],
            "formatted_address": "Esplanada D. Carlos I",
        }, center_lat=38.7635, center_lon=-9.0937)

        assert poi.id == "google-xyz"
        assert poi.category == "tourism"
        assert poi.kind == "aquarium"
        assert poi.address == "Esplanada D. Carlos I"
        assert poi.distance == 0.0

    def test_place_without_location(self):
        """It should drop places without a location."""
        assert normalize_place({"place_id": "a", "name": "x"}) is None

    @pytest.mark.parametrize("types,category", [
        (["restaurant", "tourist_attraction"], POICategory.FOOD),
        (["church"], POICategory.HISTORIC),
        (["park"], POICategory.LEISURE),
        (["shopping_mall"], POICategory.SHOP),
        (["point_of_interest", "establishment"], POICategory.AMENITY),
        ([], POICategory.OTHER),
    ])
    def test_category_from_types(self, types, category):
        """It should map Google types to categories."""
        assert category_from_place_types(types) == category
