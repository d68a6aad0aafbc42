"""Per-package verification pipeline.

For each package::

    registry lookup -> prepare clone -> resolve version -> diff -> filter

Each step returns an ``Outcome``; the first ``Err`` stops that package's
pipeline and its message becomes ``CheckResult.error_reason``. A lockfile
absolution is applied last and overrides whatever the pipeline found.

Packages are checked concurrently. Git and filesystem work runs in worker
threads, and every clone path is guarded by its own lock for the whole
prepare -> checkout -> diff span, so packages that share a repository take
turns while unrelated packages proceed in parallel.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from hexprove.core.check.locks import RepoLocks
from hexprove.core.check.models import CheckResult, HexPackage
from hexprove.core.diff import diff_directories, relevant_diffs
from hexprove.core.diff.models import FileDifference
from hexprove.core.lockfile import AbsolutionLockfile
from hexprove.core.outcome import Err, Ok, Outcome, attempt
from hexprove.core.resolver import Git, GitRef, VersionResolver
from hexprove.exceptions import HexProveError, RegistryLookupError
from hexprove.registry.base import SourceRegistry
from hexprove.registry.github import repo_subpath

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY: int = 4


class PackageChecker:
    """Runs the verification pipeline over packages.

    Args:
        registry: Looks up each package's source repository.
        git: The git collaborator.
        lockfile: Absolutions to apply to the results.
        git_parent_directory: Where clones live, as ``<parent>/<user>/<repo>``.
        deps_path: Directory holding the unpacked packages, one per name.
        main_branch: Branch prepared in every clone and used for bisecting.
        resolver: Version resolver; defaults to one built on *git*.
        max_concurrency: Upper bound on packages checked at once.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        git: Git,
        lockfile: AbsolutionLockfile,
        git_parent_directory: Path,
        deps_path: Path,
        main_branch: str = "master",
        resolver: VersionResolver | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._registry = registry
        self._git = git
        self._lockfile = lockfile
        self._git_parent_directory = Path(git_parent_directory)
        self._deps_path = Path(deps_path)
        self._main_branch = main_branch
        self._resolver = resolver or VersionResolver(git, main_branch=main_branch)
        self._max_concurrency = max_concurrency
        self._locks = RepoLocks()

    async def check_packages(self, packages: Iterable[HexPackage]) -> list[CheckResult]:
        """Check every package; results come back in input order."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(package: HexPackage) -> CheckResult:
            async with semaphore:
                return await self.check_package(package)

        return list(await asyncio.gather(*(_bounded(p) for p in packages)))

    async def check_package(self, package: HexPackage) -> CheckResult:
        """Run the full pipeline for one package. Never raises for
        per-package failures."""
        result = CheckResult(hex_package=package)

        outcome = await self._lookup_git_url(result)
        if outcome.is_ok:
            repo_path = outcome.value
            async with self._locks.lock_for(repo_path):
                outcome = await asyncio.to_thread(
                    self._resolve_and_diff, result, repo_path
                )

        if not outcome.is_ok:
            result.error_reason = str(outcome.error)
            logger.warning("%s %s: %s", package.name, package.version, outcome.error)

        message = self._lockfile.lookup(package.name, package.hash)
        if message is not None:
            result.absolution_message = message
        return result

    def repo_path_for(self, git_url: str) -> Path:
        """Local clone directory for *git_url*.

        Raises:
            RegistryLookupError: If the URL is not a GitHub repository.
        """
        try:
            return self._git_parent_directory / repo_subpath(git_url)
        except ValueError as exc:
            raise RegistryLookupError(str(exc)) from exc

    # -- Steps ---------------------------------------------------------------

    async def _lookup_git_url(self, result: CheckResult) -> Outcome[Path]:
        name = result.hex_package.name
        try:
            git_url = await self._registry.get_git_url(name)
        except HexProveError as exc:
            return Err(exc)
        result.git_url = git_url
        return attempt(self.repo_path_for, git_url)

    def _resolve_and_diff(self, result: CheckResult, repo_path: Path) -> Outcome[CheckResult]:
        # git_ref and diffs are set together, only after the diff succeeded.
        package = result.hex_package
        return (
            attempt(self._git.prepare_repo, result.git_url, repo_path, self._main_branch)
            .then(lambda _: self._resolver.resolve(package.version, repo_path))
            .then(lambda ref: self._diff(repo_path, package).then(
                lambda diffs: _record(result, ref, diffs)
            ))
        )

    def _diff(self, repo_path: Path, package: HexPackage) -> Outcome[list[FileDifference]]:
        return attempt(diff_directories, repo_path, self._deps_path / package.name)


def _record(
    result: CheckResult, ref: GitRef, diffs: list[FileDifference]
) -> Outcome[CheckResult]:
    result.git_ref = ref
    result.diffs = relevant_diffs(diffs)
    return Ok(result)
