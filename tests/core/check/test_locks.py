"""Tests for per-clone-path locking."""

from __future__ import annotations

import asyncio
from pathlib import Path

from hexprove.core.check import RepoLocks


class TestRepoLocks:
    def test_same_path_same_lock(self, tmp_path: Path) -> None:
        locks = RepoLocks()
        assert locks.lock_for(tmp_path / "a") is locks.lock_for(tmp_path / "a")

    def test_spellings_share_lock(self, tmp_path: Path) -> None:
        locks = RepoLocks()
        (tmp_path / "a").mkdir()
        assert locks.lock_for(tmp_path / "a") is locks.lock_for(tmp_path / "a" / ".." / "a")
        assert len(locks) == 1

    def test_different_paths_different_locks(self, tmp_path: Path) -> None:
        locks = RepoLocks()
        assert locks.lock_for(tmp_path / "a") is not locks.lock_for(tmp_path / "b")

    def test_holders_take_turns(self, tmp_path: Path) -> None:
        """Two tasks on one path never hold the lock at the same time."""
        locks = RepoLocks()
        active = 0
        peak = 0

        async def _work() -> None:
            nonlocal active, peak
            async with locks.lock_for(tmp_path / "repo"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        async def _main() -> None:
            await asyncio.gather(*(_work() for _ in range(5)))

        asyncio.run(_main())
        assert peak == 1
