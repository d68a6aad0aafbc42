"""Bisect probe: is this commit already at the target project version?

Run by ``git bisect run`` at every step::

    python -m hexprove.core.resolver.probe path/to/mix.exs 1.2.3

Exit codes follow ``git bisect run``:

    0   -- "good": the project version is still below the target.
    1   -- "bad": the project is at or past the target version.
    125 -- "skip": the version cannot be read at this commit.

Bisecting with these answers lands on the commit that bumped the project
to the target version.

A commit counts as "bad" once its version is at or above the target, not
merely when it differs from it. With a "differs" rule, commits on both
sides of the release would be bad; bisect requires one good run followed
by one bad run.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path

EXIT_GOOD = 0
EXIT_BAD = 1
EXIT_SKIP = 125

# version: "1.2.3" inside the project keyword list
_VERSION_KEY_RE = re.compile(r'\bversion:\s*"(?P<version>[^"]+)"')
# version: @version, with @version "1.2.3" declared elsewhere
_VERSION_ATTR_REF_RE = re.compile(r"\bversion:\s*@(?P<attr>\w+)")
_ATTR_TEMPLATE = r'@{attr}\s+"(?P<version>[^"]+)"'

_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z\-.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-.]+))?$"
)


def read_project_version(source: str) -> str | None:
    """Extract the project version declared in a ``mix.exs`` source."""
    match = _VERSION_KEY_RE.search(source)
    if match:
        return match.group("version")
    ref = _VERSION_ATTR_REF_RE.search(source)
    if ref:
        attr = re.search(_ATTR_TEMPLATE.format(attr=re.escape(ref.group("attr"))), source)
        if attr:
            return attr.group("version")
    return None


def version_key(version: str) -> tuple:
    """Sort key implementing SemVer 2.0.0 precedence.

    A pre-release sorts below its release; build metadata is ignored.

    Raises:
        ValueError: If *version* is not a semantic version.
    """
    m = _SEMVER_RE.match(version.strip())
    if not m:
        raise ValueError(f"Invalid semantic version: {version!r}")
    core = (int(m.group("major")), int(m.group("minor")), int(m.group("patch")))
    pre = m.group("pre")
    if pre is None:
        return core + ((1,),)
    identifiers = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in pre.split(".")
    )
    return core + ((0, identifiers),)


def classify(project_version: str, target_version: str) -> int:
    """Return the bisect exit code for one commit."""
    try:
        reached = version_key(project_version) >= version_key(target_version)
    except ValueError:
        return EXIT_SKIP
    return EXIT_BAD if reached else EXIT_GOOD


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("usage: probe MIX_EXS TARGET_VERSION", file=sys.stderr)
        return EXIT_SKIP
    mix_exs, target = Path(args[0]), args[1]
    try:
        source = mix_exs.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return EXIT_SKIP
    project_version = read_project_version(source)
    if project_version is None:
        return EXIT_SKIP
    return classify(project_version, target)


if __name__ == "__main__":
    sys.exit(main())
