"""Registry lookups: package name -> source repository.

Public API::

    from hexprove.registry import SourceRegistry, HexRegistry
    from hexprove.registry.github import parse_github_url, repo_subpath
"""

from __future__ import annotations

from hexprove.registry.base import SourceRegistry
from hexprove.registry.github import parse_github_url, repo_subpath
from hexprove.registry.hex_registry import HexRegistry, github_link

__all__ = [
    "HexRegistry",
    "SourceRegistry",
    "github_link",
    "parse_github_url",
    "repo_subpath",
]
