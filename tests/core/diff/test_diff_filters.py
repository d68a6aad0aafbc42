"""Tests for the relevance filter applied to raw directory diffs."""

from __future__ import annotations

from pathlib import Path

import pytest

from hexprove.core.diff import (
    DiffKind,
    FileDifference,
    diff_directories,
    is_relevant,
    relevant_diffs,
)


class TestIsRelevant:
    """Which single differences count against a package."""

    def test_baseline_only_always_dropped(self) -> None:
        assert not is_relevant(FileDifference("lib/secret.ex", DiffKind.ONLY_IN_BASELINE))

    @pytest.mark.parametrize("path", [".hex", ".fetch", "hex_metadata.config"])
    def test_packaging_artifacts_dropped(self, path: str) -> None:
        assert not is_relevant(FileDifference(path, DiffKind.ONLY_IN_CANDIDATE))

    def test_artifact_name_only_matches_at_root(self) -> None:
        """The allowlist is matched on the exact relative path."""
        assert is_relevant(FileDifference("lib/.hex", DiffKind.ONLY_IN_CANDIDATE))

    def test_ds_store_dropped_at_any_depth(self) -> None:
        assert not is_relevant(FileDifference("lib/.DS_Store", DiffKind.ONLY_IN_CANDIDATE))

    def test_content_differs_always_kept(self) -> None:
        assert is_relevant(FileDifference(".hex", DiffKind.CONTENT_DIFFERS))

    def test_extra_candidate_file_kept(self) -> None:
        assert is_relevant(FileDifference("lib/payload.ex", DiffKind.ONLY_IN_CANDIDATE))


class TestRelevantDiffs:
    def test_preserves_order(self) -> None:
        diffs = [
            FileDifference("b", DiffKind.CONTENT_DIFFERS),
            FileDifference("x", DiffKind.ONLY_IN_BASELINE),
            FileDifference("a", DiffKind.ONLY_IN_CANDIDATE),
        ]
        assert relevant_diffs(diffs) == [diffs[0], diffs[2]]

    def test_idempotent(self) -> None:
        diffs = [
            FileDifference(".hex", DiffKind.ONLY_IN_CANDIDATE),
            FileDifference("a", DiffKind.CONTENT_DIFFERS),
        ]
        assert relevant_diffs(relevant_diffs(diffs)) == relevant_diffs(diffs)

    def test_tree_with_noise(self, tmp_path: Path) -> None:
        """Only the changed file and the unexpected extra file remain."""
        baseline = tmp_path / "baseline"
        candidate = tmp_path / "candidate"
        baseline.mkdir()
        candidate.mkdir()
        (baseline / "a.txt").write_text("same")
        (baseline / "b.txt").write_text("original")
        (candidate / "a.txt").write_text("same")
        (candidate / "b.txt").write_text("modified")
        (candidate / ".hex").write_text("")
        (candidate / ".DS_Store").write_text("")
        (candidate / "c.txt").write_text("new")

        assert relevant_diffs(diff_directories(baseline, candidate)) == [
            FileDifference("b.txt", DiffKind.CONTENT_DIFFERS),
            FileDifference("c.txt", DiffKind.ONLY_IN_CANDIDATE),
        ]
