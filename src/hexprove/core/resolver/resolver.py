"""Version resolution: find the source revision of a published version.

Resolution tries, in order, and stops at the first success:

1. **Tag match** -- a tag named exactly like the version, then ``v<version>``.
2. **Bisect** -- ``git bisect run`` between the root commit and the main
   branch tip, probing the project version declared in ``mix.exs`` at each
   step. The first "bad" commit is where the project reached the target
   version.

A repository whose root commit is also its tip cannot be bisected; that
commit is returned directly.

Every step reports an ``Outcome`` rather than raising, so a package that
cannot be resolved ends up ``unresolved`` without stopping the others.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import Callable, Sequence

from hexprove.core.outcome import Err, Ok, Outcome, attempt
from hexprove.core.resolver.git import Git
from hexprove.core.resolver.models import GitRef, RefKind
from hexprove.exceptions import (
    BisectNoConvergenceError,
    CommitNotFoundError,
    GitCommandError,
    InvalidRefError,
)

logger = logging.getLogger(__name__)

BISECT_SUCCESS_LINE = "bisect run success"

# Closing line of a successful run on current git: "bisect found first bad commit"
_FOUND_LINE_RE = re.compile(r"^bisect found first [a-z]+ commit$")

# "<sha> is the first bad commit" (or whatever term the bisect used)
_FIRST_COMMIT_RE = re.compile(r"^([0-9a-f]{40}) is the first [a-z]* commit$")

ProbeFactory = Callable[[str, Path], Sequence[str]]


def default_probe(version: str, repo_path: Path) -> list[str]:
    """Command line of the bundled ``mix.exs`` version probe."""
    return [
        sys.executable,
        "-m",
        "hexprove.core.resolver.probe",
        str(repo_path / "mix.exs"),
        version,
    ]


def bisect_converged(lines: Sequence[str], exit_status: int | None = None) -> bool:
    """Did ``git bisect run`` report success?

    A zero exit status is conclusive. Without one, either closing line counts:
    ``bisect run success`` (older git) or ``bisect found first bad commit``.
    """
    if exit_status == 0:
        return True
    return any(
        line == BISECT_SUCCESS_LINE or _FOUND_LINE_RE.match(line) for line in lines
    )


def extract_bisected_commit(trace: str, exit_status: int | None = None) -> str:
    """Pull the first-bad commit hash out of a ``git bisect run`` trace.

    The conclusive line comes last, so lines are scanned from the end.

    Args:
        trace: Combined output of ``git bisect run``.
        exit_status: Its exit status, when known.

    Raises:
        BisectNoConvergenceError: If the run did not report success.
        CommitNotFoundError: If no line names the first bad commit.
    """
    lines = [line.strip() for line in trace.splitlines()]
    if not bisect_converged(lines, exit_status):
        raise BisectNoConvergenceError("git bisect run did not converge")
    for line in reversed(lines):
        match = _FIRST_COMMIT_RE.match(line)
        if match:
            return match.group(1)
    raise CommitNotFoundError("commit not found in git bisect output")


class VersionResolver:
    """Locates and checks out the revision of a published version.

    The repository at ``repo_path`` must be a clean, fully fetched clone
    with the main branch checked out (see ``Git.prepare_repo``).

    Args:
        git: The git collaborator.
        main_branch: Branch whose tip bounds the bisect range.
        probe: Builds the ``git bisect run`` command for a version.
    """

    def __init__(
        self,
        git: Git,
        main_branch: str = "master",
        probe: ProbeFactory = default_probe,
    ) -> None:
        self._git = git
        self._main_branch = main_branch
        self._probe = probe

    def resolve(self, version: str, repo_path: Path) -> Outcome[GitRef]:
        """Resolve *version* to a checked-out ``GitRef``.

        Falls back to bisecting only when no matching tag exists; any other
        tag checkout failure is reported as is.
        """
        outcome = self.checkout_by_tag(version, repo_path)
        if outcome.is_ok or not isinstance(outcome.error, InvalidRefError):
            return outcome
        logger.debug("No tag for %s in %s, bisecting", version, repo_path)
        return self.checkout_by_bisect(version, repo_path)

    def checkout_by_tag(self, version: str, repo_path: Path) -> Outcome[GitRef]:
        """Check out tag ``<version>`` or, failing that, ``v<version>``."""
        outcome: Outcome[GitRef] = Err(InvalidRefError(["checkout", version]))
        for tag in (version, "v" + version):
            outcome = attempt(self._git.checkout_tag, tag, repo_path)
            if outcome.is_ok:
                return Ok(GitRef(RefKind.TAG, tag))
            if not isinstance(outcome.error, InvalidRefError):
                return outcome
        return outcome

    def checkout_by_bisect(self, version: str, repo_path: Path) -> Outcome[GitRef]:
        """Bisect the main branch for the commit that reached *version*."""
        return attempt(self._bisect, version, repo_path).then(
            lambda commit: Ok(GitRef(RefKind.BISECT, commit))
        )

    def _bisect(self, version: str, repo_path: Path) -> str:
        git = self._git
        latest = git.commit_hash(repo_path, self._main_branch)
        initial = git.initial_commit(repo_path, self._main_branch)

        if latest == initial:
            # Single-commit history; bisect cannot work on a one-point range.
            git.checkout(latest, repo_path)
            return latest

        try:
            git.bisect_start(repo_path, bad=latest, good=initial)
            run = git.bisect_run(repo_path, self._probe(version, repo_path))
        finally:
            self._reset_bisect(repo_path)

        commit = extract_bisected_commit(run.trace, run.exit_status)
        git.checkout(commit, repo_path)
        logger.debug("Bisected %s to %s", version, commit)
        return commit

    def _reset_bisect(self, repo_path: Path) -> None:
        # Logged, not raised: the bisect's own error must propagate.
        try:
            self._git.bisect_reset(repo_path)
        except GitCommandError as exc:
            logger.warning("git bisect reset failed in %s: %s", repo_path, exc)
