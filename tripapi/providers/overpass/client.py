"""
Overpass API client.

Posts an Overpass QL query and returns the raw ``elements`` list. A single
endpoint is used per request; failures surface immediately as GeoAPIError.
"""

import logging
from typing import Any, Dict, List

import httpx

from ..http import request_json

logger = logging.getLogger(__name__)

PROVIDER_TAG = "overpass"


class OverpassClient:
    """Thin async client for an Overpass interpreter endpoint."""

    def __init__(
        self,
        endpoint: str = "https://overpass-api.de/api/interpreter",
        timeout: float = 30.0,
        user_agent: str = "trip-planner/1.0",
        max_error_chars: int = 500,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_error_chars = max_error_chars

    def _get_http_client(self) -> httpx.AsyncClient:
        """Create a new HTTP client for the current request."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"User-Agent": self.user_agent},
        )

    async def fetch_elements(self, query: str) -> List[Dict[str, Any]]:
        """
        Run an Overpass query.

        Args:
            query: Overpass QL with ``[out:json]``

        Returns:
            Raw elements from the response (empty list if none)

        Raises:
            GeoAPIError: On transport errors or non-success statuses
        """
        async with self._get_http_client() as client:
            data = await request_json(
                client,
                "POST",
                self.endpoint,
                PROVIDER_TAG,
                self.max_error_chars,
                data={"data": query},
                headers={"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"},
            )

        elements = data.get("elements", []) if isinstance(data, dict) else []
        logger.info(f"🌐 Overpass response: {len(elements)} elements returned")
        return elements
