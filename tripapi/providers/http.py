"""
Shared request helper for upstream HTTP calls.

One round-trip per call, no retries. Transport errors and non-success
statuses are converted into the error taxonomy from ``errors.py``.
"""

import logging
import time
from typing import Any

import httpx

from .errors import UpstreamFailureError, classify_upstream_error, truncate_body

logger = logging.getLogger(__name__)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    provider: str,
    max_chars: int = 500,
    **kwargs: Any,
) -> Any:
    """
    Perform one upstream request and decode its JSON body.

    Args:
        client: Open httpx client
        method: HTTP method
        url: Absolute URL
        provider: Provider tag used in errors and logs
        max_chars: Truncation limit for error bodies
        **kwargs: Passed to ``client.request`` (params, json, data, headers)

    Returns:
        Decoded JSON body

    Raises:
        GeoAPIError: On transport errors, non-2xx statuses or non-JSON bodies
    """
    start = time.time()
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        logger.warning(f"⏱️ {provider} timeout on {method} {url}: {e}")
        raise UpstreamFailureError(f"{provider} request timed out", provider=provider) from e
    except httpx.HTTPError as e:
        logger.warning(f"🌐 {provider} transport error on {method} {url}: {e}")
        raise UpstreamFailureError(f"{provider} is unreachable", provider=provider) from e

    elapsed = time.time() - start

    if response.status_code >= 400:
        logger.warning(
            f"🌐 {provider} {method} {url} -> {response.status_code} in {elapsed:.3f}s"
        )
        raise classify_upstream_error(response.status_code, response.text, provider, max_chars)

    logger.debug(f"🌐 {provider} {method} {url} -> {response.status_code} in {elapsed:.3f}s")

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamFailureError(
            f"{provider} returned an invalid response",
            provider=provider,
            upstream_status=response.status_code,
            upstream_body=truncate_body(response.text, max_chars),
        ) from e
