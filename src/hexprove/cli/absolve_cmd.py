"""``hexprove absolve NAME HASH MESSAGE`` — Trust one package tarball.

Records an absolution in the lockfile. Later checks of the tarball with
exactly this name and content hash report ``ABSOLVED`` with the message,
whatever the diff says.

Exit Codes:
    0 — Absolution recorded.
    2 — Invalid hash, or the lockfile could not be read or written.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from hexprove.config import load_settings
from hexprove.core.lockfile import AbsolutionLockfile, is_valid_hash
from hexprove.exceptions import ConfigError, LockfileError


@click.command("absolve")
@click.argument("name")
@click.argument("content_hash", metavar="HASH")
@click.argument("message")
@click.option("--lockfile", "lockfile_path", type=click.Path(dir_okay=False),
              default=None, help="Absolution lockfile.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False),
              default=None, help="Config file.")
def absolve_command(
    name: str,
    content_hash: str,
    message: str,
    lockfile_path: str | None,
    config_path: str | None,
) -> None:
    """Mark the tarball of NAME with content HASH as trusted, with MESSAGE."""
    content_hash = content_hash.lower()
    if not is_valid_hash(content_hash):
        click.echo(f"Error: not a SHA-256 content hash: {content_hash}", err=True)
        sys.exit(2)

    try:
        settings = load_settings(Path(config_path) if config_path else None).override(
            lockfile_path=lockfile_path,
        )
        lockfile = AbsolutionLockfile.read(settings.lockfile_path)
        lockfile.absolve(name, content_hash, message)
        lockfile.write(settings.lockfile_path)
    except (ConfigError, LockfileError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    click.echo(f"Absolved {name} ({content_hash}) in {settings.lockfile_path}")
