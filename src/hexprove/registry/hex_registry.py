"""hex.pm registry client.

Looks a package up in the hex.pm HTTP API and returns the GitHub link its
maintainers published in the package metadata.

Usage::

    registry = HexRegistry()
    url = await registry.get_git_url("jason")
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hexprove.exceptions import RegistryLookupError
from hexprove.registry.base import SourceRegistry
from hexprove.registry.github import parse_github_url
from hexprove.registry.http_client import fetch_json

logger = logging.getLogger(__name__)

HEX_PACKAGE_API: str = "https://hex.pm/api/packages/{package}"


class HexRegistry(SourceRegistry):
    """Source repository lookup against hex.pm.

    Args:
        api_url: Package endpoint template with a ``{package}`` field.
        client: Shared HTTP client; by default each lookup opens its own.
    """

    def __init__(
        self,
        api_url: str = HEX_PACKAGE_API,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = api_url
        self._client = client

    @property
    def registry_name(self) -> str:
        """Return the human-readable registry name."""
        return "hex.pm"

    async def get_git_url(self, package_name: str) -> str:
        """Return the GitHub URL linked from *package_name*'s metadata."""
        data = await fetch_json(
            self._api_url.format(package=package_name), client=self._client
        )
        if not data or not isinstance(data, dict):
            raise RegistryLookupError(
                f"No metadata for {package_name!r} on {self.registry_name}"
            )
        url = github_link(data)
        if url is None:
            raise RegistryLookupError(
                f"{package_name!r} on {self.registry_name} links no GitHub repository"
            )
        logger.debug("%s -> %s", package_name, url)
        return url


def github_link(package_data: dict[str, Any]) -> str | None:
    """Pick the GitHub repository link out of hex.pm package metadata.

    Prefers a link whose label is "GitHub" (any case), then any link that
    points at a GitHub repository.
    """
    meta = package_data.get("meta") or {}
    links = meta.get("links") or {}
    if not isinstance(links, dict):
        return None

    candidates = [url for label, url in links.items() if str(label).lower() == "github"]
    candidates += [url for url in links.values() if url not in candidates]
    for url in candidates:
        if not isinstance(url, str):
            continue
        try:
            parse_github_url(url)
        except ValueError:
            continue
        return url.strip()
    return None
