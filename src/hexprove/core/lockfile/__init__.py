"""Absolution lockfile --- manual trust overrides per package tarball.

Submodules:
    models    -- AbsolutionEntry, hash validation
    lockfile  -- AbsolutionLockfile (lookup, absolve, read, write)
"""

from hexprove.core.lockfile.lockfile import DEFAULT_LOCKFILE_NAME, AbsolutionLockfile
from hexprove.core.lockfile.models import AbsolutionEntry, is_valid_hash

__all__ = [
    "AbsolutionEntry",
    "AbsolutionLockfile",
    "DEFAULT_LOCKFILE_NAME",
    "is_valid_hash",
]
