"""Base class for registry clients that locate package source repositories."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SourceRegistry(ABC):
    """Maps a registry package name to its source repository URL.

    Subclasses implement ``get_git_url`` for one registry.
    """

    @property
    @abstractmethod
    def registry_name(self) -> str:
        """Human-readable name of this registry (e.g. 'hex.pm')."""

    @abstractmethod
    async def get_git_url(self, package_name: str) -> str:
        """Return the source repository URL of *package_name*.

        Raises:
            RegistryLookupError: If the package is unknown or links to no
                source repository.
        """
