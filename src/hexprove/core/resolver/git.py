"""Thin wrapper over the ``git`` executable.

Only the handful of operations provenance checking needs: keeping a clone
up to date and clean, checking out refs, and driving ``git bisect``. Every
command runs with ``cwd`` set to the repository; a non-zero exit raises
``GitCommandError`` with the captured stderr.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from hexprove.core.resolver.models import BisectRun
from hexprove.exceptions import GitCommandError, InvalidRefError

logger = logging.getLogger(__name__)


class Git:
    """Runs git commands against local repositories.

    Args:
        executable: Name or path of the git binary.
    """

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    # -- Low level -----------------------------------------------------------

    def run(self, args: Sequence[str], cwd: Path, *, check: bool = True) -> str:
        """Run ``git <args>`` in *cwd* and return its standard output.

        Raises:
            GitCommandError: If the command exits non-zero and *check* is set.
        """
        logger.debug("git %s (in %s)", " ".join(args), cwd)
        completed = subprocess.run(
            [self.executable, *args],
            cwd=cwd,
            capture_output=True,
            text=True,
        )
        if check and completed.returncode != 0:
            raise GitCommandError(list(args), completed.stderr)
        return completed.stdout

    # -- Repository preparation ----------------------------------------------

    def ensure_repo(self, url: str, path: Path) -> None:
        """Clone *url* into *path* unless a repository is already there."""
        if (path / ".git").is_dir():
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        self.run(["clone", "--quiet", url, str(path)], cwd=path.parent)

    def reset_clean(self, path: Path) -> None:
        """Discard local modifications and untracked files."""
        self.run(["reset", "--quiet", "--hard", "HEAD"], cwd=path)
        self.run(["clean", "--quiet", "-ffdx"], cwd=path)

    def prepare_repo(self, url: str, path: Path, main_branch: str = "master") -> None:
        """Bring a clone of *url* at *path* to a clean, up-to-date state.

        A clone left mid-bisect by an interrupted run is reset first.
        """
        self.ensure_repo(url, path)
        self.bisect_reset(path)
        self.run(["checkout", "--quiet", main_branch], cwd=path)
        self.run(["pull", "--quiet", "origin", main_branch], cwd=path)
        self.run(["fetch", "--quiet", "--tags"], cwd=path)
        self.reset_clean(path)

    # -- Refs ------------------------------------------------------------------

    def commit_hash(self, path: Path, ref: str) -> str:
        """Return the full commit hash *ref* points at.

        Raises:
            InvalidRefError: If *ref* does not name a commit.
        """
        try:
            output = self.run(
                ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], cwd=path
            )
        except GitCommandError as exc:
            raise InvalidRefError(exc.args_, exc.stderr) from exc
        return output.strip()

    def initial_commit(self, path: Path, ref: str = "HEAD") -> str:
        """Return the root commit reachable from *ref*.

        When history has several roots, the oldest one is returned.
        """
        output = self.run(["rev-list", "--max-parents=0", ref], cwd=path)
        roots = output.split()
        if not roots:
            raise GitCommandError(["rev-list", "--max-parents=0", ref], "no root commit")
        return roots[-1]

    def checkout(self, ref: str, path: Path) -> None:
        """Check out *ref*, detaching HEAD if it is not a branch.

        Raises:
            InvalidRefError: If *ref* does not exist.
        """
        self.commit_hash(path, ref)
        self.run(["checkout", "--quiet", ref], cwd=path)

    def checkout_tag(self, tag: str, path: Path) -> None:
        """Check out the tag named exactly *tag*.

        Raises:
            InvalidRefError: If no such tag exists.
        """
        self.checkout(f"refs/tags/{tag}", path)

    # -- Bisect ----------------------------------------------------------------

    def bisect_start(self, path: Path, bad: str, good: str) -> None:
        self.run(["bisect", "start", bad, good], cwd=path)

    def bisect_run(self, path: Path, command: Sequence[str]) -> BisectRun:
        """Run ``git bisect run`` and return its exit status and trace.

        A non-zero exit is not raised; callers decide convergence from the
        status and the trace together.
        """
        completed = subprocess.run(
            [self.executable, "bisect", "run", *command],
            cwd=path,
            capture_output=True,
            text=True,
        )
        logger.debug("git bisect run exited %d", completed.returncode)
        return BisectRun(completed.returncode, completed.stdout + completed.stderr)

    def bisect_reset(self, path: Path) -> None:
        self.run(["bisect", "reset"], cwd=path)
