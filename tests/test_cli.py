"""
Tests for the tripplanner command line client.

HTTP calls are replaced with canned ``httpx.Response`` objects; the
offline commands (decode, order) run as is.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner

from tripplanner.cli import main as cli_main
from tripplanner.cli.main import app, parse_coordinate

runner = CliRunner()


def _response(method, url, payload, status_code=200):
    return httpx.Response(status_code, json=payload, request=httpx.Request(method, url))


class TestParseCoordinate:
    """Tests for LNG,LAT argument parsing."""

    def test_valid(self):
        """It should parse a lng,lat pair."""
        assert parse_coordinate("-9.1393,38.7223") == [-9.1393, 38.7223]

    @pytest.mark.parametrize("value", ["-9.1", "a,b", "1,2,3"])
    def test_invalid(self, value):
        """It should reject anything that is not two numbers."""
        import typer

        with pytest.raises(typer.BadParameter):
            parse_coordinate(value)


class TestDecodeCommand:
    """Tests for the offline decode command."""

    def test_decode(self):
        """It should print the decoded points."""
        result = runner.invoke(app, ["decode", "_p~iF~ps|U_ulLnnqC_mqNvxq`@"])

        assert result.exit_code == 0
        assert "38.50000" in result.output
        assert "-120.20000" in result.output

    def test_decode_empty(self):
        """It should report when nothing is decoded."""
        result = runner.invoke(app, ["decode", ""])

        assert result.exit_code == 0
        assert "No points decoded" in result.output


class TestOrderCommand:
    """Tests for the offline order command."""

    MATRIX = [
        [0, 10, 1, 5],
        [10, 0, 3, 2],
        [1, 3, 0, 8],
        [5, 2, 8, 0],
    ]

    def test_order(self, tmp_path):
        """It should print the nearest-neighbor order and its cost."""
        matrix_file = tmp_path / "matrix.json"
        matrix_file.write_text(json.dumps(self.MATRIX))

        result = runner.invoke(app, ["order", str(matrix_file)])

        assert result.exit_code == 0
        assert "0 -> 2 -> 1 -> 3" in result.output
        assert "6.0" in result.output

    def test_order_from_matrix_response(self, tmp_path):
        """It should accept a saved /matrix response."""
        matrix_file = tmp_path / "matrix.json"
        matrix_file.write_text(json.dumps({"durations": self.MATRIX, "distances": None}))

        result = runner.invoke(app, ["order", str(matrix_file), "--fixed-end"])

        assert result.exit_code == 0
        assert "0 -> 2 -> 1 -> 3" in result.output

    def test_order_invalid_file(self, tmp_path):
        """It should fail on unreadable matrix files."""
        matrix_file = tmp_path / "matrix.json"
        matrix_file.write_text("not json")

        result = runner.invoke(app, ["order", str(matrix_file)])

        assert result.exit_code == 1


class TestApiCommands:
    """Tests for the commands that call the API."""

    def test_route(self, monkeypatch):
        """It should post the stops and print the summary."""
        captured = {}

        def fake_post(url, json=None, timeout=None):
            captured["url"] = url
            captured["json"] = json
            return _response("POST", url, {
                "provider": "google",
                "distance": 2500.0,
                "duration": 600.0,
                "waypoint_order": [0, 2, 1, 3],
                "instructions": [
                    {"distance": 2500.0, "duration": 600.0, "instruction": "Head north", "way_points": [0, 1]},
                ],
            })

        monkeypatch.setenv("TRIPAPI_URL", "http://api.test/")
        monkeypatch.setattr(cli_main.httpx, "post", fake_post)

        result = runner.invoke(app, ["route", "-9.1,38.7", "-9.2,38.6", "--profile", "driving-car"])

        assert result.exit_code == 0
        assert captured["url"] == "http://api.test/route"
        assert captured["json"] == {"coords": [[-9.1, 38.7], [-9.2, 38.6]], "profile": "driving-car"}
        assert "2.50 km" in result.output
        assert "0 -> 2 -> 1 -> 3" in result.output

    def test_route_keeps_negative_stops_in_order(self, monkeypatch):
        """It should accept western and southern coordinates as stops."""
        captured = {}

        def fake_post(url, json=None, timeout=None):
            captured["json"] = json
            return _response("POST", url, {"provider": "google", "distance": 10.0, "duration": 5.0})

        monkeypatch.setattr(cli_main.httpx, "post", fake_post)

        result = runner.invoke(
            app,
            ["route", "--provider", "google", "-43.17,-22.90", "-9.14,38.72", "-0.12,51.50"],
        )

        assert result.exit_code == 0
        assert captured["json"]["coords"] == [[-43.17, -22.9], [-9.14, 38.72], [-0.12, 51.5]]
        assert captured["json"]["provider"] == "google"

    def test_route_http_error(self, monkeypatch):
        """It should exit with an error when the API rejects the request."""
        def fake_post(url, json=None, timeout=None):
            return _response("POST", url, {"error": "Invalid request data"}, status_code=400)

        monkeypatch.setattr(cli_main.httpx, "post", fake_post)

        result = runner.invoke(app, ["route", "-9.1,38.7", "-9.2,38.6"])

        assert result.exit_code == 1
        assert "400" in result.output

    def test_route_bad_coordinate(self):
        """It should reject malformed coordinates."""
        result = runner.invoke(app, ["route", "-9.1", "-9.2,38.6"])
        assert result.exit_code != 0

    def test_pois(self, monkeypatch):
        """It should query the Overpass endpoint and list the POIs."""
        captured = {}

        def fake_get(url, params=None, timeout=None):
            captured["params"] = params
            return _response("GET", url, {
                "pois": [
                    {"id": "osm-node-1", "name": "Santini", "lat": 38.7, "lon": -9.1,
                     "kind": "ice_cream", "category": "food"},
                ],
                "metadata": {"count": 1},
            })

        monkeypatch.setattr(cli_main.httpx, "get", fake_get)

        result = runner.invoke(app, ["pois", "--lat", "38.7", "--lon", "-9.1", "--radius", "500"])

        assert result.exit_code == 0
        assert captured["params"] == {"lat": 38.7, "lon": -9.1, "radius": 500}
        assert "Santini" in result.output
        assert "1 POIs within 500 m" in result.output

    def test_pois_empty(self, monkeypatch):
        """It should report when nothing is found."""
        monkeypatch.setattr(
            cli_main.httpx,
            "get",
            lambda url, params=None, timeout=None: _response("GET", url, {"pois": [], "metadata": {}}),
        )

        result = runner.invoke(app, ["pois", "--lat", "38.7", "--lon", "-9.1"])

        assert result.exit_code == 0
        assert "No POIs found." in result.output

    def test_matrix(self, monkeypatch):
        """It should print the requested grids."""
        captured = {}

        def fake_post(url, json=None, timeout=None):
            captured["json"] = json
            return _response("POST", url, {
                "provider": "openrouteservice",
                "durations": [[0.0, 120.0], [120.0, 0.0]],
                "distances": None,
                "metadata": {"locations": 2, "profile": "foot-walking", "metrics": ["duration"]},
            })

        monkeypatch.setattr(cli_main.httpx, "post", fake_post)

        result = runner.invoke(app, ["matrix", "-9.1,38.7", "-9.2,38.6", "--provider", "openrouteservice"])

        assert result.exit_code == 0
        assert captured["json"]["metrics"] == ["duration"]
        assert captured["json"]["provider"] == "openrouteservice"
        assert "Durations" in result.output
        assert "Distances" not in result.output
