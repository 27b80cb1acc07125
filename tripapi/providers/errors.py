"""
Error taxonomy for the geo provider layer.

Every failure that can reach a caller is a ``GeoAPIError`` subclass carrying a
stable HTTP status code and error type. Upstream failures also keep the
upstream status code and a truncated copy of the upstream body for
diagnostics. The HTTP layer turns these into ``{"error", "details"}`` bodies.
"""

from typing import Any, Dict, Optional


DEFAULT_BODY_MAX_CHARS = 500


def truncate_body(body: Any, max_chars: int = DEFAULT_BODY_MAX_CHARS) -> Optional[str]:
    """Shorten an upstream payload for inclusion in error details."""
    if body is None:
        return None
    text = body if isinstance(body, str) else str(body)
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


class GeoAPIError(Exception):
    """Base class for all caller-facing geo errors."""

    status_code: int = 500
    error_type: str = "internal"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        self.details = details

    def to_details(self) -> Any:
        """Build the ``details`` member of the error response body."""
        if self.details is not None:
            return self.details
        if self.provider is None and self.upstream_status is None:
            return None
        details: Dict[str, Any] = {"type": self.error_type}
        if self.provider:
            details["provider"] = self.provider
        if self.upstream_status is not None:
            details["upstream_status"] = self.upstream_status
        if self.upstream_body:
            details["upstream_body"] = self.upstream_body
        return details


class BadRequestError(GeoAPIError):
    """Malformed or invalid request, detected before any upstream call."""
    status_code = 400
    error_type = "bad_request"


class ProviderConfigError(GeoAPIError):
    """Missing or rejected upstream credentials."""
    status_code = 500
    error_type = "unauthorized_config"


class InvalidParamsError(GeoAPIError):
    """Upstream rejected the semantic content of a well-formed request."""
    status_code = 400
    error_type = "invalid_params"


class QuotaExceededError(GeoAPIError):
    """Upstream quota exhausted or access forbidden."""
    status_code = 429
    error_type = "quota_exceeded"


class RateLimitedError(GeoAPIError):
    """Upstream throttled the request."""
    status_code = 429
    error_type = "rate_limited"


class NotFoundError(GeoAPIError):
    """Upstream could not resolve a route, matrix or place."""
    status_code = 404
    error_type = "not_found"


class UpstreamFailureError(GeoAPIError):
    """Any other upstream failure, including transport errors."""
    status_code = 502
    error_type = "upstream_failure"


_HTTP_STATUS_TO_ERROR = {
    400: (InvalidParamsError, "Invalid parameters for {provider}"),
    401: (ProviderConfigError, "{provider} API key is missing or invalid"),
    403: (QuotaExceededError, "{provider} quota exceeded or access forbidden"),
    404: (NotFoundError, "{provider} could not find a result for the request"),
    422: (InvalidParamsError, "Invalid parameters for {provider}"),
    429: (RateLimitedError, "{provider} rate limit exceeded"),
}


def classify_upstream_error(
    status_code: int,
    body: Any,
    provider: str,
    max_chars: int = DEFAULT_BODY_MAX_CHARS,
) -> GeoAPIError:
    """
    Map a non-success upstream HTTP response to a caller-facing error.

    Args:
        status_code: Upstream HTTP status
        body: Upstream response body (text or decoded JSON)
        provider: Provider tag for messages
        max_chars: Truncation limit for the diagnostic body

    Returns:
        GeoAPIError subclass instance (not raised)
    """
    error_class, template = _HTTP_STATUS_TO_ERROR.get(
        status_code,
        (UpstreamFailureError, "{provider} request failed"),
    )
    return error_class(
        template.format(provider=provider),
        provider=provider,
        upstream_status=status_code,
        upstream_body=truncate_body(body, max_chars),
    )


_GOOGLE_STATUS_TO_ERROR = {
    "REQUEST_DENIED": (ProviderConfigError, "Google Maps API key is missing or invalid"),
    "OVER_DAILY_LIMIT": (QuotaExceededError, "Google Maps quota exceeded"),
    "OVER_QUERY_LIMIT": (RateLimitedError, "Google Maps rate limit exceeded"),
    "INVALID_REQUEST": (InvalidParamsError, "Invalid parameters for Google Maps"),
    "MAX_WAYPOINTS_EXCEEDED": (InvalidParamsError, "Too many waypoints for Google Maps"),
    "MAX_ROUTE_LENGTH_EXCEEDED": (InvalidParamsError, "Route too long for Google Maps"),
    "MAX_ELEMENTS_EXCEEDED": (InvalidParamsError, "Too many matrix elements for Google Maps"),
    "MAX_DIMENSIONS_EXCEEDED": (InvalidParamsError, "Too many matrix locations for Google Maps"),
    "NOT_FOUND": (NotFoundError, "Google Maps could not geocode one of the locations"),
    "ZERO_RESULTS": (NotFoundError, "Google Maps found no results"),
}


def classify_google_status(
    status: Optional[str],
    body: Any,
    http_status: int = 200,
    max_chars: int = DEFAULT_BODY_MAX_CHARS,
) -> GeoAPIError:
    """
    Map a Google ``status`` field other than OK to a caller-facing error.

    Google reports most failures with HTTP 200 and a status string.
    """
    error_class, message = _GOOGLE_STATUS_TO_ERROR.get(
        status or "",
        (UpstreamFailureError, "Google Maps request failed"),
    )
    return error_class(
        f"{message} ({status})" if status else message,
        provider="google",
        upstream_status=http_status,
        upstream_body=truncate_body(body, max_chars),
    )
