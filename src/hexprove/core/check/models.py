"""Check data models: the package under test and its verification record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hexprove.core.diff.models import FileDifference
from hexprove.core.resolver.models import GitRef


@dataclass(frozen=True)
class HexPackage:
    """A resolved registry artifact, as pinned by the project.

    Attributes:
        name: Hex package name (also its directory name under ``deps/``).
        version: Locked version.
        hash: Content hash of the locked tarball.
    """

    name: str
    version: str
    hash: str


@dataclass
class CheckResult:
    """Verification record of one package.

    Created empty at the start of a check and filled in as each pipeline
    step succeeds. Once the pipeline returns it, it is not modified again.

    Attributes:
        hex_package: The package being checked.
        git_url: Source repository URL, once the registry lookup succeeded.
        git_ref: The revision matched to the version, once resolved.
        diffs: Relevant differences between source and artifact.
        error_reason: Why the pipeline stopped early, if it did.
        absolution_message: Lockfile override message, if any.
    """

    hex_package: HexPackage
    git_url: str | None = None
    git_ref: GitRef | None = None
    diffs: list[FileDifference] = field(default_factory=list)
    error_reason: str | None = None
    absolution_message: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.hex_package.name,
            "version": self.hex_package.version,
            "hash": self.hex_package.hash,
            "git_url": self.git_url,
            "git_ref": self.git_ref.as_dict() if self.git_ref else None,
            "diffs": [diff.as_dict() for diff in self.diffs],
            "error_reason": self.error_reason,
            "absolution_message": self.absolution_message,
        }
