"""Classified differences between a baseline tree and a candidate tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiffKind(Enum):
    """How a path differs between the two trees.

    The baseline is the source of truth (the checked-out repository); the
    candidate is the unpacked distributed artifact.
    """

    ONLY_IN_BASELINE = "only_in_baseline"
    ONLY_IN_CANDIDATE = "only_in_candidate"
    CONTENT_DIFFERS = "content_differs"


@dataclass(frozen=True)
class FileDifference:
    """One differing file, addressed relative to the tree roots.

    Attributes:
        relative_path: POSIX-style path relative to both roots.
        kind: The classification of the difference.
    """

    relative_path: str
    kind: DiffKind

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.relative_path}"

    def as_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "path": self.relative_path}
