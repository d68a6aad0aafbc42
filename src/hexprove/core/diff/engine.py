"""Recursive comparison of two directory trees.

``diff_directories`` is a pure function of the two trees: it reads files,
never writes, and reports paths relative to the roots so results are the
same on every machine. Deciding which differences matter is left to the
caller (see ``filters``).
"""

from __future__ import annotations

import filecmp
import logging
import os
from pathlib import Path

from hexprove.core.diff.models import DiffKind, FileDifference
from hexprove.exceptions import DiffError

logger = logging.getLogger(__name__)

# Directories at the tree root that are never part of either side.
_IGNORED_ROOT_DIRS: frozenset[str] = frozenset({".git"})


def diff_directories(baseline: Path, candidate: Path) -> list[FileDifference]:
    """Compare every file under *baseline* and *candidate*.

    Args:
        baseline: Source-of-truth tree, e.g. a checked-out repository.
        candidate: Tree under test, e.g. an unpacked package.

    Returns:
        Differences sorted by relative path. Identical files produce no
        entry.

    Raises:
        DiffError: If either root is not a directory or a file cannot be
            read.
    """
    baseline = Path(baseline)
    candidate = Path(candidate)
    for root in (baseline, candidate):
        if not root.is_dir():
            raise DiffError(f"Not a directory: {root}")

    try:
        baseline_files = _list_files(baseline)
        candidate_files = _list_files(candidate)
        diffs: list[FileDifference] = []
        for relative in sorted(baseline_files | candidate_files):
            if relative not in candidate_files:
                diffs.append(FileDifference(relative, DiffKind.ONLY_IN_BASELINE))
            elif relative not in baseline_files:
                diffs.append(FileDifference(relative, DiffKind.ONLY_IN_CANDIDATE))
            elif not filecmp.cmp(
                baseline / relative, candidate / relative, shallow=False
            ):
                diffs.append(FileDifference(relative, DiffKind.CONTENT_DIFFERS))
    except OSError as exc:
        raise DiffError(f"Cannot diff {baseline} against {candidate}: {exc}") from exc

    logger.debug(
        "Diffed %s against %s: %d differences", baseline, candidate, len(diffs)
    )
    return diffs


def _list_files(root: Path) -> set[str]:
    """Return POSIX relative paths of every file below *root*."""
    files: set[str] = set()

    def _raise(error: OSError) -> None:
        raise error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        current = Path(dirpath)
        if current == root:
            dirnames[:] = [d for d in dirnames if d not in _IGNORED_ROOT_DIRS]
        for name in filenames:
            files.add((current / name).relative_to(root).as_posix())
    return files
