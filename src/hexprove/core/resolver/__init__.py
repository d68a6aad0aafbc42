"""Version resolver: published version -> source revision.

Submodules:
    models    -- RefKind, GitRef, BisectRun
    git       -- Git (the git executable collaborator)
    resolver  -- VersionResolver, extract_bisected_commit
    probe     -- the ``mix.exs`` version probe run by ``git bisect``
"""

from hexprove.core.resolver.git import Git
from hexprove.core.resolver.models import BisectRun, GitRef, RefKind
from hexprove.core.resolver.resolver import (
    BISECT_SUCCESS_LINE,
    VersionResolver,
    bisect_converged,
    default_probe,
    extract_bisected_commit,
)

__all__ = [
    "BISECT_SUCCESS_LINE",
    "BisectRun",
    "Git",
    "GitRef",
    "RefKind",
    "VersionResolver",
    "bisect_converged",
    "default_probe",
    "extract_bisected_commit",
]
