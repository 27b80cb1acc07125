"""
Tests for the provider error taxonomy and upstream classification.
"""

import pytest

from tripapi.providers.errors import (
    BadRequestError,
    InvalidParamsError,
    NotFoundError,
    ProviderConfigError,
    QuotaExceededError,
    RateLimitedError,
    UpstreamFailureError,
    classify_google_status,
    classify_upstream_error,
    truncate_body,
)


class TestClassifyUpstreamError:
    """Tests for HTTP status classification."""

    @pytest.mark.parametrize("status,error_class,http_status", [
        (400, InvalidParamsError, 400),
        (401, ProviderConfigError, 500),
        (403, QuotaExceededError, 429),
        (404, NotFoundError, 404),
        (422, InvalidParamsError, 400),
        (429, RateLimitedError, 429),
        (500, UpstreamFailureError, 502),
        (503, UpstreamFailureError, 502),
    ])
    def test_status_mapping(self, status, error_class, http_status):
        """It should map upstream statuses to the error taxonomy."""
        error = classify_upstream_error(status, "body", "openrouteservice")

        assert isinstance(error, error_class)
        assert error.status_code == http_status
        assert error.upstream_status == status
        assert error.provider == "openrouteservice"

    def test_body_is_truncated(self):
        """It should keep at most max_chars of the upstream body."""
        error = classify_upstream_error(500, "x" * 1000, "overpass", max_chars=500)

        assert error.upstream_body == "x" * 500 + "..."

    def test_details(self):
        """It should expose type, provider, status and body as details."""
        error = classify_upstream_error(401, '{"error": "bad key"}', "openrouteservice")

        assert error.to_details() == {
            "type": "unauthorized_config",
            "provider": "openrouteservice",
            "upstream_status": 401,
            "upstream_body": '{"error": "bad key"}',
        }


class TestClassifyGoogleStatus:
    """Tests for Google status field classification."""

    @pytest.mark.parametrize("status,error_class", [
        ("REQUEST_DENIED", ProviderConfigError),
        ("OVER_DAILY_LIMIT", QuotaExceededError),
        ("OVER_QUERY_LIMIT", RateLimitedError),
        ("INVALID_REQUEST", InvalidParamsError),
        ("MAX_WAYPOINTS_EXCEEDED", InvalidParamsError),
        ("MAX_ELEMENTS_EXCEEDED", InvalidParamsError),
        ("NOT_FOUND", NotFoundError),
        ("ZERO_RESULTS", NotFoundError),
        ("UNKNOWN_ERROR", UpstreamFailureError),
        (None, UpstreamFailureError),
    ])
    def test_status_mapping(self, status, error_class):
        """It should map Google status strings to the error taxonomy."""
        error = classify_google_status(status, {"status": status})

        assert isinstance(error, error_class)
        assert error.provider == "google"

    def test_message_includes_status(self):
        """It should mention the Google status in the message."""
        error = classify_google_status("OVER_QUERY_LIMIT", {})
        assert "OVER_QUERY_LIMIT" in error.message


class TestErrorDetails:
    """Tests for GeoAPIError details."""

    def test_local_errors_have_no_details(self):
        """It should leave details empty for errors raised before any upstream call."""
        assert BadRequestError("Invalid coordinates").to_details() is None

    def test_explicit_details_win(self):
        """It should return explicit details unchanged."""
        details = [{"field": "coords", "message": "too many"}]
        assert BadRequestError("Invalid request data", details=details).to_details() == details

    def test_truncate_none(self):
        """It should pass None through."""
        assert truncate_body(None) is None

    def test_truncate_short_body(self):
        """It should keep short bodies unchanged."""
        assert truncate_body("short", 10) == "short"
