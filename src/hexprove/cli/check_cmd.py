"""``hexprove check`` — Verify packages against their source repositories.

For every package: find its GitHub repository on hex.pm, clone or update
it, locate the revision of the locked version (tag or bisect), and diff
that revision against the unpacked package under ``deps/``.

Output is a rich table (``--format text``), one plain line per package
(``--format plain``, for logs and pipes), or JSON.

Packages are given with ``--package NAME VERSION HASH`` (repeatable) or in
a YAML packages file::

    - name: jason
      version: 1.4.1
      hash: 9f3c...

Exit Codes:
    0  — Every package is honest or absolved.
    2  — Invalid input (configuration, packages file, lockfile).
    3  — A required external capability is missing.
    11 — At least one package could not be resolved (and none is corrupt).
    12 — At least one package does not match its source.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
import yaml

from hexprove.config import Settings, load_settings
from hexprove.core.check import (
    CheckResult,
    CheckStatus,
    HexPackage,
    PackageChecker,
    aggregate_exit_code,
    check_required_capabilities,
    evaluate_status,
    header_line,
    render_line,
)
from hexprove.core.lockfile import AbsolutionLockfile
from hexprove.core.resolver import Git
from hexprove.exceptions import (
    ConfigError,
    LockfileError,
    MissingCapabilitiesError,
)
from hexprove.registry import HexRegistry
from hexprove.registry.http_client import new_client

logger = logging.getLogger(__name__)

EXIT_USAGE = 2
EXIT_MISSING_CAPABILITIES = 3


def load_packages_file(path: Path) -> list[HexPackage]:
    """Read packages from a YAML list of ``{name, version, hash}`` mappings.

    Raises:
        ConfigError: If the file is not such a list.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read packages file {path}: {exc}") from exc
    if not isinstance(data, list):
        raise ConfigError(f"Packages file {path} must contain a list")

    packages: list[HexPackage] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ConfigError(f"Package entry {index} must be a mapping")
        try:
            packages.append(_package(entry["name"], entry["version"], entry["hash"]))
        except KeyError as exc:
            raise ConfigError(f"Package entry {index} is missing {exc}") from exc
    return packages


def _package(name: object, version: object, content_hash: object) -> HexPackage:
    return HexPackage(
        name=str(name), version=str(version), hash=str(content_hash).lower()
    )


async def _check_all(
    packages: list[HexPackage], settings: Settings, lockfile: AbsolutionLockfile
) -> list[CheckResult]:
    async with new_client() as client:
        checker = PackageChecker(
            registry=HexRegistry(client=client),
            git=Git(),
            lockfile=lockfile,
            git_parent_directory=settings.git_parent_directory,
            deps_path=settings.deps_path,
            main_branch=settings.main_branch,
            max_concurrency=settings.max_concurrency,
        )
        return await checker.check_packages(packages)


@click.command("check")
@click.option(
    "--package", "-p", "package_args",
    nargs=3, multiple=True, metavar="NAME VERSION HASH",
    help="A package to check (repeatable).",
)
@click.option(
    "--packages-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML list of packages to check.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: ./.hexprove.yaml if present).",
)
@click.option("--deps-path", type=click.Path(file_okay=False), default=None,
              help="Directory of unpacked packages (default: deps).")
@click.option("--repos-path", type=click.Path(file_okay=False), default=None,
              help="Parent directory for local clones.")
@click.option("--lockfile", "lockfile_path", type=click.Path(dir_okay=False),
              default=None, help="Absolution lockfile.")
@click.option("--main-branch", default=None, help="Branch to prepare and bisect.")
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None,
              help="Packages checked in parallel.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "plain", "json"]),
    default="text",
    help="Output format: rich table, plain lines, or JSON (default: text).",
)
def check_command(
    package_args: tuple[tuple[str, str, str], ...],
    packages_file: str | None,
    config_path: str | None,
    deps_path: str | None,
    repos_path: str | None,
    lockfile_path: str | None,
    main_branch: str | None,
    jobs: int | None,
    output_format: str,
) -> None:
    """Verify that packages match the source they claim to come from.

    Exit code 0 if every package is honest or absolved, 11 if some could
    not be resolved, 12 if some do not match their source.
    """
    try:
        settings = load_settings(Path(config_path) if config_path else None).override(
            deps_path=deps_path,
            git_parent_directory=repos_path,
            lockfile_path=lockfile_path,
            main_branch=main_branch,
            max_concurrency=jobs,
        )
        packages = [_package(*args) for args in package_args]
        if packages_file:
            packages += load_packages_file(Path(packages_file))
        lockfile = AbsolutionLockfile.read(settings.lockfile_path)
    except (ConfigError, LockfileError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_USAGE)

    if not packages:
        click.echo("No packages to check.", err=True)
        sys.exit(EXIT_USAGE)

    try:
        check_required_capabilities()
    except MissingCapabilitiesError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_MISSING_CAPABILITIES)

    logger.debug(
        "Checking %d packages, %d at a time", len(packages), settings.max_concurrency
    )
    results = asyncio.run(_check_all(packages, settings, lockfile))
    statuses = [evaluate_status(result) for result in results]

    if output_format == "json":
        click.echo(json.dumps([
            {**result.as_dict(), "status": status.value}
            for result, status in zip(results, statuses)
        ], indent=2))
    elif output_format == "plain":
        click.echo(header_line())
        for result in results:
            click.echo(render_line(result))
    else:
        from hexprove.cli.output import print_check_results, print_error_reasons
        print_check_results(results)
        if any(status is CheckStatus.UNRESOLVED for status in statuses):
            print_error_reasons(results)

    sys.exit(aggregate_exit_code(statuses))
