"""Which directory differences matter for provenance.

Hex adds a few bookkeeping files when it unpacks a package, and source
repositories carry files (tests, CI config) that are never published.
Neither says anything about whether the published code matches the
source, so both are dropped here.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable

from hexprove.core.diff.models import DiffKind, FileDifference

# Files Hex writes next to an unpacked package.
PACKAGING_ARTIFACTS: frozenset[str] = frozenset({
    ".hex",
    ".fetch",
    "hex_metadata.config",
})

# Base names dropped wherever they appear in the candidate tree.
IGNORED_BASENAMES: frozenset[str] = frozenset({".DS_Store"})


def is_relevant(diff: FileDifference) -> bool:
    """Return True if *diff* can indicate a mismatch with the source."""
    if diff.kind is DiffKind.ONLY_IN_BASELINE:
        return False
    if diff.kind is DiffKind.ONLY_IN_CANDIDATE:
        if diff.relative_path in PACKAGING_ARTIFACTS:
            return False
        if PurePosixPath(diff.relative_path).name in IGNORED_BASENAMES:
            return False
    return True


def relevant_diffs(diffs: Iterable[FileDifference]) -> list[FileDifference]:
    """Keep only the differences that matter, preserving order."""
    return [diff for diff in diffs if is_relevant(diff)]
