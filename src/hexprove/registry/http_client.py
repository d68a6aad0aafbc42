"""Shared async HTTP client utilities for registry lookups.

Provides a thin wrapper around ``httpx.AsyncClient`` with standardised
timeouts, user-agent headers, and error handling, so that every registry
client behaves the same way and can be mocked in one place.

Network failures are logged and reported as an empty result; callers turn
an empty result into a ``RegistryLookupError`` with package context.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hexprove import __version__

logger = logging.getLogger(__name__)

# Timeout for all registry HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = f"hexprove/{__version__}"

# Status codes that mean "no such package" rather than a registry failure.
_NOT_FOUND_STATUSES: frozenset[int] = frozenset({404, 410})


def new_client(timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> httpx.AsyncClient:
    """Create an ``AsyncClient`` with the standard headers and timeout."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        **kwargs,
    )


async def fetch_json(
    url: str,
    *,
    params: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any] | list[Any]:
    """Fetch a URL and parse the response as JSON.

    Args:
        url: The URL to fetch.
        params: Optional query parameters.
        timeout: Request timeout in seconds (ignored with *client*).
        client: Reuse this client instead of opening a new one.

    Returns:
        Parsed JSON response (dict or list). Empty dict on any error.
    """
    try:
        if client is not None:
            return await _get_json(client, url, params)
        async with new_client(timeout) as own_client:
            return await _get_json(own_client, url, params)
    except httpx.TimeoutException:
        logger.warning("Timeout fetching %s", url)
        return {}
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status in _NOT_FOUND_STATUSES:
            logger.debug("Not found: %s", url)
        else:
            logger.warning("HTTP %d from %s", status, url)
        return {}
    except (httpx.RequestError, ValueError) as exc:
        logger.warning("Request error for %s: %s", url, exc)
        return {}


async def _get_json(
    client: httpx.AsyncClient, url: str, params: dict[str, str] | None
) -> dict[str, Any] | list[Any]:
    resp = await client.get(url, params=params)
    resp.raise_for_status()
    return resp.json()
