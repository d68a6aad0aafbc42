"""Directory diff engine.

Submodules:
    models   -- DiffKind, FileDifference
    engine   -- diff_directories (pure tree comparison)
    filters  -- relevant_diffs (drops packaging noise)
"""

from hexprove.core.diff.engine import diff_directories
from hexprove.core.diff.filters import (
    IGNORED_BASENAMES,
    PACKAGING_ARTIFACTS,
    is_relevant,
    relevant_diffs,
)
from hexprove.core.diff.models import DiffKind, FileDifference

__all__ = [
    "DiffKind",
    "FileDifference",
    "IGNORED_BASENAMES",
    "PACKAGING_ARTIFACTS",
    "diff_directories",
    "is_relevant",
    "relevant_diffs",
]
