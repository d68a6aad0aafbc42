"""Absolution lockfile --- local trust overrides.

A package that fails verification (for example because its maintainer
publishes generated files) can be absolved after manual review. The
absolution is stored per ``(package name, content hash)`` and turns that
exact tarball's status into ``absolved`` on every later check.

File format (``hexprove-lock.json``)::

    {
      "absolved": {
        "<package name>": {"<content hash>": "<message>"}
      },
      "lockfile_version": "1.0"
    }

Serialization is deterministic: keys are sorted, so two lockfiles with the
same entries are byte-identical.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from hexprove.core.lockfile.models import AbsolutionEntry, is_valid_hash
from hexprove.exceptions import LockfileError

logger = logging.getLogger(__name__)

DEFAULT_LOCKFILE_NAME = "hexprove-lock.json"


class AbsolutionLockfile:
    """In-memory view of the absolution lockfile.

    Example::

        lf = AbsolutionLockfile.read(Path("hexprove-lock.json"))
        lf.absolve("jason", "9f3c...", "generated parser, reviewed by hand")
        lf.write(Path("hexprove-lock.json"))
    """

    LOCKFILE_VERSION: str = "1.0"

    def __init__(self) -> None:
        self._absolved: dict[str, dict[str, str]] = {}

    # -- Entries ---------------------------------------------------------------

    def lookup(self, package_name: str, content_hash: str) -> str | None:
        """Return the absolution message for this exact tarball, if any."""
        return self._absolved.get(package_name, {}).get(content_hash)

    def absolve(self, package_name: str, content_hash: str, message: str) -> None:
        """Record (or replace) the absolution of one tarball."""
        self._absolved.setdefault(package_name, {})[content_hash] = message

    def entries(self) -> list[AbsolutionEntry]:
        """Return every entry, sorted by package name then hash."""
        return [
            AbsolutionEntry(name, content_hash, self._absolved[name][content_hash])
            for name in sorted(self._absolved)
            for content_hash in sorted(self._absolved[name])
        ]

    def __len__(self) -> int:
        return sum(len(hashes) for hashes in self._absolved.values())

    # -- Serialization ---------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "lockfile_version": self.LOCKFILE_VERSION,
            "absolved": {
                name: dict(sorted(hashes.items()))
                for name, hashes in sorted(self._absolved.items())
            },
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True) + "\n"

    def write(self, path: Path) -> None:
        """Write the lockfile, creating parent directories as needed.

        Raises:
            LockfileError: If the file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_json(), encoding="utf-8")
        except OSError as exc:
            raise LockfileError(f"Cannot write lockfile {path}: {exc}") from exc

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AbsolutionLockfile:
        """Build a lockfile from its parsed JSON form.

        Raises:
            LockfileError: If the structure is not name -> hash -> message,
                or a hash is not a lowercase Hex checksum.
        """
        if not isinstance(data, dict):
            raise LockfileError("Lockfile root must be an object")
        absolved = data.get("absolved", {})
        if not isinstance(absolved, dict):
            raise LockfileError("'absolved' must be an object")

        lf = cls()
        for name, hashes in absolved.items():
            if not isinstance(hashes, dict):
                raise LockfileError(f"Entry for {name!r} must be an object")
            for content_hash, message in hashes.items():
                if not is_valid_hash(content_hash):
                    raise LockfileError(
                        f"Invalid content hash {content_hash!r} for {name!r}"
                    )
                if not isinstance(message, str):
                    raise LockfileError(
                        f"Absolution message for {name!r} must be a string"
                    )
                lf.absolve(name, content_hash, message)
        return lf

    @classmethod
    def read(cls, path: Path) -> AbsolutionLockfile:
        """Load a lockfile from disk. A missing file is an empty lockfile.

        Raises:
            LockfileError: If the file exists but is unreadable or invalid.
        """
        if not path.exists():
            logger.debug("No lockfile at %s", path)
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise LockfileError(f"Cannot read lockfile {path}: {exc}") from exc
        return cls.from_dict(data)
