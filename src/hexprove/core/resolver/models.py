"""Git references produced by version resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RefKind(Enum):
    """How a revision was located."""

    TAG = "tag"
    BISECT = "bisect"


@dataclass(frozen=True)
class GitRef:
    """A concrete revision believed to match a published version.

    Attributes:
        kind: ``TAG`` when a release tag matched, ``BISECT`` when the
            revision was found by bisecting the project version.
        name: The tag name, or the 40-character commit hash.
    """

    kind: RefKind
    name: str

    @property
    def label(self) -> str:
        """Human-readable form, e.g. ``tag:v1.2.3``."""
        return f"{self.kind.value}:{self.name}"

    def as_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "name": self.name}


@dataclass(frozen=True)
class BisectRun:
    """Outcome of one ``git bisect run``.

    Attributes:
        exit_status: Exit status of ``git bisect run`` (0 when it found a
            first bad commit).
        trace: Combined stdout and stderr.
    """

    exit_status: int
    trace: str
