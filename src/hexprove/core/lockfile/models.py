"""Absolution entries recorded in ``hexprove-lock.json``."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Hex tarball checksums are lowercase hex SHA-256 digests.
_HASH_RE = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class AbsolutionEntry:
    """A user's decision to trust one exact package tarball.

    Keyed by name and content hash, so a new release (or a re-published
    tarball) is never covered by an older absolution.

    Attributes:
        package_name: Hex package name.
        hash: Content hash of the absolved tarball.
        message: Why the package was absolved.
    """

    package_name: str
    hash: str
    message: str


def is_valid_hash(value: str) -> bool:
    """Return True if *value* looks like a Hex tarball checksum."""
    return bool(_HASH_RE.match(value))
