"""``hexprove key`` — Manage the local audit signing key.

Subcommands:
    generate — Create an Ed25519 key pair in the keys directory.
    show     — Print the fingerprint of the local key.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from hexprove.config import load_settings
from hexprove.core.audit import (
    fingerprint,
    generate_private_key,
    load_private_key,
    write_key_pair,
)
from hexprove.core.audit.signing import PRIVATE_KEY_FILENAME
from hexprove.exceptions import ConfigError, SignatureError


def resolve_keys_directory(keys_dir: str | None, config_path: str | None = None) -> Path:
    """Keys directory from the option, else from settings."""
    if keys_dir:
        return Path(keys_dir).expanduser()
    try:
        return load_settings(Path(config_path) if config_path else None).keys_directory
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)


@click.group("key")
def key_group() -> None:
    """Manage the Ed25519 key used to sign audits."""


@key_group.command("generate")
@click.option("--keys-dir", type=click.Path(file_okay=False), default=None,
              help="Where to store the key pair.")
@click.option("--force", is_flag=True, help="Overwrite an existing key.")
def generate_command(keys_dir: str | None, force: bool) -> None:
    """Create a new signing key pair and print its fingerprint."""
    directory = resolve_keys_directory(keys_dir)
    if (directory / PRIVATE_KEY_FILENAME).exists() and not force:
        click.echo(
            f"Error: a key already exists in {directory} (use --force to replace it)",
            err=True,
        )
        sys.exit(1)

    private_key = generate_private_key()
    private_path, public_path = write_key_pair(private_key, directory)
    click.echo(f"Private key: {private_path}")
    click.echo(f"Public key:  {public_path}")
    click.echo(f"Fingerprint: {fingerprint(private_key.public_key())}")


@key_group.command("show")
@click.option("--keys-dir", type=click.Path(file_okay=False), default=None,
              help="Where the key pair is stored.")
def show_command(keys_dir: str | None) -> None:
    """Print the fingerprint of the local signing key."""
    directory = resolve_keys_directory(keys_dir)
    try:
        private_key = load_private_key(directory / PRIVATE_KEY_FILENAME)
    except SignatureError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(fingerprint(private_key.public_key()))
