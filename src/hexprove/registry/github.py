"""GitHub URL helpers: owner/repo extraction and local clone paths."""

from __future__ import annotations

import re

_GITHUB_URL_RE = re.compile(
    r"^(?:https?://(?:www\.)?github\.com/|git@github\.com:|ssh://git@github\.com/)"
    r"(?P<user>[^/\s]+)/(?P<repo>[^/\s#?]+?)(?:\.git)?/?(?:[#?].*)?$",
    re.IGNORECASE,
)

# Anything outside this set is replaced in local clone paths.
_UNSAFE_PATH_CHARS_RE = re.compile(r"[^a-zA-Z0-9_/-]")


def parse_github_url(url: str) -> tuple[str, str]:
    """Return ``(user, repo)`` for a GitHub repository URL.

    Accepts ``https://github.com/u/r``, ``.git`` suffixes, trailing
    slashes, and ``git@github.com:u/r.git``.

    Raises:
        ValueError: If *url* is not a GitHub repository URL.
    """
    match = _GITHUB_URL_RE.match(url.strip())
    if not match:
        raise ValueError(f"Not a GitHub repository URL: {url!r}")
    return match.group("user"), match.group("repo")


def repo_subpath(url: str) -> str:
    """Local clone path for *url*, relative to the clone parent directory.

    ``user/repo`` with every character outside ``[a-zA-Z0-9_/-]`` replaced
    by ``_``, so it is always a safe two-level relative path.
    """
    user, repo = parse_github_url(url)
    return _UNSAFE_PATH_CHARS_RE.sub("_", f"{user}/{repo}")
