"""Package checks: pipeline orchestration and trust status.

Submodules:
    models     -- HexPackage, CheckResult
    status     -- CheckStatus, evaluate_status, exit codes, rendering
    pipeline   -- PackageChecker (concurrent per-package pipeline)
    locks      -- RepoLocks (one lock per clone path)
    preflight  -- check_required_capabilities
"""

from hexprove.core.check.locks import RepoLocks
from hexprove.core.check.models import CheckResult, HexPackage
from hexprove.core.check.pipeline import DEFAULT_MAX_CONCURRENCY, PackageChecker
from hexprove.core.check.preflight import (
    REQUIRED_CAPABILITIES,
    check_required_capabilities,
)
from hexprove.core.check.status import (
    EXIT_CODES,
    NOT_FOUND,
    CheckStatus,
    aggregate_exit_code,
    evaluate_status,
    exit_code,
    header_line,
    located_by,
    render_line,
    repo_label,
    status_label,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "DEFAULT_MAX_CONCURRENCY",
    "EXIT_CODES",
    "HexPackage",
    "NOT_FOUND",
    "PackageChecker",
    "REQUIRED_CAPABILITIES",
    "RepoLocks",
    "aggregate_exit_code",
    "check_required_capabilities",
    "evaluate_status",
    "exit_code",
    "header_line",
    "located_by",
    "render_line",
    "repo_label",
    "status_label",
]
