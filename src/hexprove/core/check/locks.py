"""One exclusive lock per local clone path.

Checkout, reset and bisect all mutate the clone on disk, so two packages
that share a repository must not touch it at the same time. Paths are
canonicalised before lookup so that different spellings of the same
directory share one lock.
"""

from __future__ import annotations

import asyncio
from pathlib import Path


class RepoLocks:
    """Registry of ``asyncio.Lock`` objects keyed by resolved path."""

    def __init__(self) -> None:
        self._locks: dict[Path, asyncio.Lock] = {}

    def lock_for(self, path: Path) -> asyncio.Lock:
        """Return the lock guarding *path*, creating it on first use."""
        key = Path(path).expanduser().resolve()
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)
