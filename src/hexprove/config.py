"""hexprove settings and the optional ``.hexprove.yaml`` file.

Settings come from three layers, later ones winning: built-in defaults,
the YAML file, then CLI options. The YAML file is a flat mapping using the
field names of ``Settings``::

    git_parent_directory: ~/.hexprove/repos
    deps_path: deps
    lockfile_path: hexprove-lock.json
    main_branch: master
    max_concurrency: 4
    keys_directory: ~/.hexprove/keys
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from hexprove.core.lockfile import DEFAULT_LOCKFILE_NAME
from hexprove.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".hexprove.yaml"
HEXPROVE_HOME = Path("~/.hexprove")

_PATH_FIELDS = frozenset({
    "git_parent_directory",
    "deps_path",
    "lockfile_path",
    "keys_directory",
})


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for a hexprove run.

    Attributes:
        git_parent_directory: Parent of all local clones.
        deps_path: Directory holding the project's unpacked packages.
        lockfile_path: Absolution lockfile.
        main_branch: Branch prepared in clones and bisected.
        max_concurrency: Packages checked at once.
        keys_directory: Where the local signing key pair lives.
    """

    git_parent_directory: Path = field(default_factory=lambda: HEXPROVE_HOME / "repos")
    deps_path: Path = Path("deps")
    lockfile_path: Path = Path(DEFAULT_LOCKFILE_NAME)
    main_branch: str = "master"
    max_concurrency: int = 4
    keys_directory: Path = field(default_factory=lambda: HEXPROVE_HOME / "keys")

    def expanded(self) -> Settings:
        """Return a copy with ``~`` expanded in every path."""
        return replace(
            self,
            **{name: Path(getattr(self, name)).expanduser() for name in _PATH_FIELDS},
        )

    def override(self, **values: Any) -> Settings:
        """Return a copy with every non-None value applied."""
        return _apply(self, {k: v for k, v in values.items() if v is not None})


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from *path*, or from ``./.hexprove.yaml`` if present.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, has unknown
            keys, or has values of the wrong type.
    """
    explicit = path is not None
    path = Path(path) if explicit else Path(CONFIG_FILENAME)
    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return Settings().expanded()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    logger.debug("Loaded settings from %s", path)
    return _apply(Settings(), data).expanded()


def _apply(settings: Settings, values: dict[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError("Unknown config keys: " + ", ".join(unknown))

    converted: dict[str, Any] = {}
    for name, value in values.items():
        if name in _PATH_FIELDS:
            if not isinstance(value, (str, Path)):
                raise ConfigError(f"{name} must be a path")
            converted[name] = Path(value).expanduser()
        elif name == "max_concurrency":
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError("max_concurrency must be a positive integer")
            converted[name] = value
        else:
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{name} must be a non-empty string")
            converted[name] = value
    return replace(settings, **converted)
