"""Trust status evaluation and one-line rendering of check results.

``evaluate_status`` is a total function over a ``CheckResult``. The rules
are tried in this fixed order and the first match wins:

1. ``ABSOLVED``   -- the lockfile absolves this exact tarball.
2. ``UNRESOLVED`` -- no git URL, or no git ref was resolved.
3. ``HONEST``     -- the relevant diff list is empty.
4. ``CORRUPT``    -- the relevant diff list is not empty.

Exit codes: ``ABSOLVED`` and ``HONEST`` map to 0, ``UNRESOLVED`` to 11,
``CORRUPT`` to 12.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from hexprove.core.check.models import CheckResult
from hexprove.core.diff.filters import relevant_diffs
from hexprove.registry.github import parse_github_url

NOT_FOUND = "NOT_FOUND"


class CheckStatus(Enum):
    """Final verdict on a package."""

    HONEST = "honest"
    CORRUPT = "corrupt"
    UNRESOLVED = "unresolved"
    ABSOLVED = "absolved"


EXIT_CODES: dict[CheckStatus, int] = {
    CheckStatus.ABSOLVED: 0,
    CheckStatus.HONEST: 0,
    CheckStatus.UNRESOLVED: 11,
    CheckStatus.CORRUPT: 12,
}


def evaluate_status(result: CheckResult) -> CheckStatus:
    """Derive the status of *result* (see module docstring for the order)."""
    if result.absolution_message is not None:
        return CheckStatus.ABSOLVED
    if result.git_url is None or result.git_ref is None:
        return CheckStatus.UNRESOLVED
    if not relevant_diffs(result.diffs):
        return CheckStatus.HONEST
    return CheckStatus.CORRUPT


def exit_code(status: CheckStatus) -> int:
    """Return the CLI exit code for one status."""
    return EXIT_CODES[status]


def aggregate_exit_code(statuses: Iterable[CheckStatus]) -> int:
    """Return the most severe exit code of a run (0 when nothing was checked)."""
    return max((exit_code(status) for status in statuses), default=0)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def header_line() -> str:
    return "Dependency  Version  Github  LocatedBy  Status"


def repo_label(result: CheckResult) -> str:
    """``user/repo`` of the source repository, or ``NOT_FOUND``."""
    if result.git_url is None:
        return NOT_FOUND
    try:
        user, repo = parse_github_url(result.git_url)
    except ValueError:
        return result.git_url
    return f"{user}/{repo}"


def located_by(result: CheckResult) -> str:
    """How the revision was found, e.g. ``tag:v1.0.0``, or ``NOT_FOUND``."""
    if result.git_ref is None:
        return NOT_FOUND
    return result.git_ref.label


def status_label(result: CheckResult, status: CheckStatus | None = None) -> str:
    """Status column text; corrupt lists its diffs, absolved its message."""
    status = status or evaluate_status(result)
    if status is CheckStatus.CORRUPT:
        diffs = ", ".join(str(diff) for diff in relevant_diffs(result.diffs))
        return f"CORRUPT: [{diffs}]"
    if status is CheckStatus.ABSOLVED:
        return (
            f"ABSOLVED: {result.hex_package.hash} - "
            f"\"{result.absolution_message}\""
        )
    return status.name


def render_line(result: CheckResult) -> str:
    """One summary line per package, in ``header_line`` column order."""
    package = result.hex_package
    return "  ".join([
        package.name,
        package.version,
        repo_label(result),
        located_by(result),
        status_label(result),
    ])
