"""hexprove exception hierarchy.

All public exceptions inherit from HexProveError, giving callers a single
base class to catch when they want to handle any hexprove-specific failure
without swallowing unrelated errors.

Per-package failures (registry lookup, git, version resolution, diffing) are
captured into that package's ``CheckResult`` by the pipeline and never abort
the other packages. Only ``MissingCapabilitiesError`` and programmer errors
are allowed to stop a whole run.
"""

from __future__ import annotations


class HexProveError(Exception):
    """Base exception for all hexprove errors."""


class MissingCapabilitiesError(HexProveError):
    """Raised by the pre-flight check when required programs are absent.

    Aggregates every missing program into a single error so the user can
    install them all at once.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Missing required programs: " + ", ".join(self.missing)
        )


class RegistryLookupError(HexProveError):
    """Raised when the registry has no usable source repository URL.

    Covers unknown packages, HTTP failures, and packages whose metadata
    carries no GitHub link.
    """


class GitCommandError(HexProveError):
    """Raised when a git invocation exits with a non-zero status.

    Attributes:
        args_: The git arguments that failed (without the ``git`` prefix).
        stderr: Captured standard error of the failed command.
    """

    def __init__(self, args_: list[str], stderr: str = "") -> None:
        self.args_ = list(args_)
        self.stderr = stderr.strip()
        message = f"git {' '.join(self.args_)} failed"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class InvalidRefError(GitCommandError):
    """Raised when a checkout names a ref that does not exist."""


class VersionUnresolvedError(HexProveError):
    """Raised when no revision could be matched to a published version."""


class BisectNoConvergenceError(VersionUnresolvedError):
    """Raised when ``git bisect run`` did not report success."""


class CommitNotFoundError(VersionUnresolvedError):
    """Raised when a successful bisect trace names no first bad commit."""


class DiffError(HexProveError):
    """Raised when a directory tree cannot be read for diffing."""


class CodecError(HexProveError):
    """Base class for audit record encoding and decoding failures."""


class UnrecognizedRecordKindError(CodecError):
    """Raised when encoding or decoding is asked for an unknown record kind."""


class MalformedEncodingError(CodecError):
    """Raised when bytes do not parse as the expected record schema."""


class SignatureError(HexProveError):
    """Raised when a signed audit fails verification.

    Covers bad signatures and fingerprints that do not belong to the
    verifying key.
    """


class LockfileError(HexProveError):
    """Raised when the absolution lockfile cannot be read or written."""


class ConfigError(HexProveError):
    """Raised for invalid ``.hexprove.yaml`` configuration files."""
