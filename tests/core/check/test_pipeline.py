"""Tests for PackageChecker with a fake registry and fake git.

The diff step runs for real against temporary trees laid out the way the
checker expects: clones under ``<repos>/<user>/<repo>`` and unpacked
packages under ``<deps>/<name>``.
"""

from __future__ import annotations

import asyncio
import shutil
import threading
import time
from pathlib import Path

import pytest

from hexprove.core.check import CheckStatus, HexPackage, PackageChecker, evaluate_status
from hexprove.core.lockfile import AbsolutionLockfile
from hexprove.core.resolver import GitRef, RefKind
from hexprove.exceptions import GitCommandError, RegistryLookupError
from hexprove.registry.base import SourceRegistry

from tests.core.resolver.fakes import FakeGit

HASH = "b" * 64


class FakeRegistry(SourceRegistry):
    """Registry answering from a fixed name -> URL table."""

    def __init__(self, urls: dict[str, str]) -> None:
        self.urls = urls
        self.lookups: list[str] = []

    @property
    def registry_name(self) -> str:
        return "fake"

    async def get_git_url(self, package_name: str) -> str:
        self.lookups.append(package_name)
        try:
            return self.urls[package_name]
        except KeyError:
            raise RegistryLookupError(f"{package_name} not found") from None


@pytest.fixture
def layout(tmp_path: Path, source_tree: Path, package_tree: Path) -> dict[str, Path]:
    """Clone of jason under repos/, matching unpacked package under deps/."""
    repos = tmp_path / "repos"
    clone = repos / "michalmuskala" / "jason"
    clone.parent.mkdir(parents=True)
    shutil.copytree(source_tree, clone)
    return {"repos": repos, "deps": package_tree.parent, "clone": clone}


def _checker(
    layout: dict[str, Path],
    git: FakeGit,
    urls: dict[str, str] | None = None,
    lockfile: AbsolutionLockfile | None = None,
    **kwargs,
) -> PackageChecker:
    registry = FakeRegistry(
        urls if urls is not None else {"jason": "https://github.com/michalmuskala/jason"}
    )
    return PackageChecker(
        registry=registry,
        git=git,
        lockfile=lockfile or AbsolutionLockfile(),
        git_parent_directory=layout["repos"],
        deps_path=layout["deps"],
        **kwargs,
    )


def _check(checker: PackageChecker, *packages: HexPackage):
    return asyncio.run(checker.check_packages(packages))


JASON = HexPackage("jason", "1.4.1", HASH)


class TestHappyPath:
    """A package whose tree matches its tagged source."""

    def test_honest(self, layout) -> None:
        git = FakeGit(tags=["v1.4.1"])
        [result] = _check(_checker(layout, git), JASON)
        assert result.git_url == "https://github.com/michalmuskala/jason"
        assert result.git_ref == GitRef(RefKind.TAG, "v1.4.1")
        assert result.diffs == []
        assert result.error_reason is None
        assert evaluate_status(result) is CheckStatus.HONEST

    def test_prepares_clone_on_main_branch(self, layout) -> None:
        git = FakeGit(tags=["1.4.1"])
        _check(_checker(layout, git, main_branch="main"), JASON)
        assert git.calls[0] == (
            "prepare_repo", "https://github.com/michalmuskala/jason", layout["clone"], "main"
        )

    def test_modified_file_is_corrupt(self, layout, package_tree: Path) -> None:
        (package_tree / "lib" / "jason.ex").write_text("defmodule Jason do\n  def evil, do: :ok\nend\n")
        [result] = _check(_checker(layout, FakeGit(tags=["1.4.1"])), JASON)
        assert evaluate_status(result) is CheckStatus.CORRUPT
        assert [d.relative_path for d in result.diffs] == ["lib/jason.ex"]

    def test_recorded_diffs_are_filtered(self, layout) -> None:
        """Hex bookkeeping files never reach the result."""
        [result] = _check(_checker(layout, FakeGit(tags=["1.4.1"])), JASON)
        assert all(d.relative_path not in {".hex", "hex_metadata.config"} for d in result.diffs)


class TestFailures:
    """Failures stop one package's pipeline and leave it unresolved."""

    def test_unknown_package(self, layout) -> None:
        [result] = _check(_checker(layout, FakeGit(), urls={}), JASON)
        assert result.git_url is None
        assert "not found" in result.error_reason
        assert evaluate_status(result) is CheckStatus.UNRESOLVED

    def test_non_github_url(self, layout) -> None:
        git = FakeGit()
        [result] = _check(_checker(layout, git, urls={"jason": "https://gitlab.com/a/b"}), JASON)
        assert result.git_url == "https://gitlab.com/a/b"
        assert result.git_ref is None
        assert evaluate_status(result) is CheckStatus.UNRESOLVED
        assert git.calls == []

    def test_prepare_failure(self, layout) -> None:
        class BrokenGit(FakeGit):
            def prepare_repo(self, url, path, main_branch="master"):
                raise GitCommandError(["clone", url], "repository not found")

        [result] = _check(_checker(layout, BrokenGit()), JASON)
        assert "repository not found" in result.error_reason
        assert evaluate_status(result) is CheckStatus.UNRESOLVED

    def test_unresolvable_version(self, layout) -> None:
        git = FakeGit(trace="Bisecting...\n", exit_status=1)
        [result] = _check(_checker(layout, git), JASON)
        assert result.git_ref is None
        assert "did not converge" in result.error_reason

    def test_missing_unpacked_package_is_not_honest(self, layout) -> None:
        other = HexPackage("poison", "1.0.0", HASH)
        urls = {"poison": "https://github.com/michalmuskala/jason"}
        [result] = _check(_checker(layout, FakeGit(tags=["1.0.0"]), urls=urls), other)
        assert result.git_ref is None
        assert "Not a directory" in result.error_reason
        assert evaluate_status(result) is CheckStatus.UNRESOLVED

    def test_one_failure_does_not_stop_others(self, layout) -> None:
        unknown = HexPackage("ghost", "0.1.0", HASH)
        results = _check(_checker(layout, FakeGit(tags=["1.4.1"])), unknown, JASON)
        assert [r.hex_package.name for r in results] == ["ghost", "jason"]
        assert [evaluate_status(r) for r in results] == [
            CheckStatus.UNRESOLVED,
            CheckStatus.HONEST,
        ]


class TestAbsolution:
    def test_absolution_overrides_corruption(self, layout, package_tree: Path) -> None:
        (package_tree / "extra.ex").write_text("")
        lockfile = AbsolutionLockfile()
        lockfile.absolve("jason", HASH, "reviewed")
        [result] = _check(_checker(layout, FakeGit(tags=["1.4.1"]), lockfile=lockfile), JASON)
        assert result.absolution_message == "reviewed"
        assert evaluate_status(result) is CheckStatus.ABSOLVED

    def test_absolution_applies_even_when_unresolved(self, layout) -> None:
        lockfile = AbsolutionLockfile()
        lockfile.absolve("jason", HASH, "vendored")
        [result] = _check(_checker(layout, FakeGit(), urls={}, lockfile=lockfile), JASON)
        assert evaluate_status(result) is CheckStatus.ABSOLVED

    def test_other_hash_not_absolved(self, layout) -> None:
        lockfile = AbsolutionLockfile()
        lockfile.absolve("jason", "c" * 64, "old tarball")
        [result] = _check(_checker(layout, FakeGit(tags=["1.4.1"]), lockfile=lockfile), JASON)
        assert result.absolution_message is None


class TestConcurrency:
    def test_rejects_zero_concurrency(self, layout) -> None:
        with pytest.raises(ValueError):
            _checker(layout, FakeGit(), max_concurrency=0)

    def test_shared_repository_is_serialized(self, layout) -> None:
        """Packages sharing a clone never run git work at the same time."""
        class TrackingGit(FakeGit):
            def __init__(self) -> None:
                super().__init__(tags=["1.4.1"])
                self.active = 0
                self.peak = 0
                self._guard = threading.Lock()

            def prepare_repo(self, url, path, main_branch="master"):
                with self._guard:
                    self.active += 1
                    self.peak = max(self.peak, self.active)
                time.sleep(0.02)

            def checkout_tag(self, tag, path):
                super().checkout_tag(tag, path)
                with self._guard:
                    self.active -= 1

        git = TrackingGit()
        results = _check(_checker(layout, git, max_concurrency=4), *([JASON] * 4))
        assert git.peak == 1
        assert all(evaluate_status(r) is CheckStatus.HONEST for r in results)

    def test_results_in_input_order(self, layout) -> None:
        names = ["a", "b", "c", "jason"]
        packages = [HexPackage(name, "1.4.1", HASH) for name in names]
        results = _check(_checker(layout, FakeGit(tags=["1.4.1"])), *packages)
        assert [r.hex_package.name for r in results] == names
