"""
Upstream JSON retrieval

Best-effort GET of a JSON document. There is no retry: any transport error,
non-success status or undecodable body is reported as "no data" and the
caller carries on with what it has.
"""
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

_REDACTED_PARAMS = ("api_key", "apikey", "token")


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> Any | None:
    """
    Fetch and decode a JSON document.

    Args:
        client: Shared async HTTP client
        url: Absolute URL to request
        params: Optional query parameters

    Returns:
        Decoded JSON value, or None on any network, status or parse failure
    """
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        logger.warning(
            "Request failed for %s: %s",
            sanitize_url_for_logging(url, params),
            type(exc).__name__,
        )
        return None

    if not response.is_success:
        logger.debug(
            "HTTP %s from %s",
            response.status_code,
            sanitize_url_for_logging(url, params),
        )
        return None

    try:
        return response.json()
    except ValueError as exc:
        logger.warning(
            "Invalid JSON from %s: %s",
            sanitize_url_for_logging(url, params),
            exc,
        )
        return None


def sanitize_url_for_logging(url: str, params: dict[str, Any] | None = None) -> str:
    """Remove credentials and API keys from a URL for safe logging."""
    try:
        parsed = httpx.URL(url, params=params)
    except (httpx.InvalidURL, TypeError, ValueError):
        return url

    if parsed.userinfo:
        parsed = parsed.copy_with(username="***", password="***")

    for name in _REDACTED_PARAMS:
        if name in parsed.params:
            parsed = parsed.copy_set_param(name, "***")
    return str(parsed)
