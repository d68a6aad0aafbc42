"""``hexprove audit`` — Create and inspect signed audits.

Subcommands:
    create — Sign an audit of a package version with the local key.
    show   — Decode a signed audit file and optionally verify it.

Exit Codes (show):
    0 — Decoded (and, with ``--public-key``, the signature is valid).
    1 — The signature does not verify.
    2 — The file is not a signed audit.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import click

from hexprove.cli.key_cmd import resolve_keys_directory
from hexprove.core.audit import (
    DEFAULT,
    NO_VALUE,
    Audit,
    Package,
    Present,
    RecordKind,
    Verdict,
    decode,
    encode,
    field_value,
    fingerprint,
    load_private_key,
    load_public_key,
    sign_audit,
    verify_signed_audit,
    with_defaults,
)
from hexprove.core.audit.signing import PRIVATE_KEY_FILENAME
from hexprove.exceptions import CodecError, SignatureError


@click.group("audit")
def audit_group() -> None:
    """Create and inspect signed package audits."""


@audit_group.command("create")
@click.argument("name")
@click.argument("version")
@click.option("--ecosystem", default=None, help="Package registry (default: hex.pm).")
@click.option(
    "--verdict",
    type=click.Choice([verdict.value for verdict in Verdict]),
    default=None,
    help="Your opinion of the package.",
)
@click.option("--message", "-m", default=None, help="Free-form audit comment.")
@click.option("--by-author", is_flag=True, help="You are the package author.")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (default: <name>-<version>.audit).",
)
@click.option("--keys-dir", type=click.Path(file_okay=False), default=None,
              help="Where the signing key pair is stored.")
def create_command(
    name: str,
    version: str,
    ecosystem: str | None,
    verdict: str | None,
    message: str | None,
    by_author: bool,
    output: str | None,
    keys_dir: str | None,
) -> None:
    """Sign an audit of package NAME at VERSION."""
    directory = resolve_keys_directory(keys_dir)
    try:
        private_key = load_private_key(directory / PRIVATE_KEY_FILENAME)
    except SignatureError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Run 'hexprove key generate' first.", err=True)
        sys.exit(1)

    audit = Audit(
        package=Package(
            name=name,
            version=version,
            ecosystem=Present(ecosystem) if ecosystem else DEFAULT,
        ),
        public_key_fingerprint=fingerprint(private_key.public_key()),
        created_at=int(time.time()),
        audited_by_author=by_author,
        verdict=Present(Verdict(verdict)) if verdict else NO_VALUE,
        message=Present(message) if message else NO_VALUE,
    )
    signed = sign_audit(audit, private_key)

    output_path = Path(output) if output else Path(f"{name}-{version}.audit")
    output_path.write_bytes(encode(signed))
    click.echo(f"Audit written to {output_path}")


@audit_group.command("show")
@click.argument("audit_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--public-key",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="PEM public key to verify the signature against.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def show_command(audit_file: str, public_key: str | None, output_format: str) -> None:
    """Decode AUDIT_FILE and optionally verify its signature."""
    try:
        signed = decode(Path(audit_file).read_bytes(), RecordKind.SIGNED_AUDIT)
    except CodecError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    verified: bool | None = None
    failure: str | None = None
    if public_key:
        try:
            verify_signed_audit(signed, load_public_key(Path(public_key)))
            verified = True
        except SignatureError as exc:
            verified = False
            failure = str(exc)

    if output_format == "json":
        from hexprove.cli.output import print_json
        print_json(_audit_as_dict(signed.audit, verified))
    else:
        from hexprove.cli.output import print_signed_audit
        print_signed_audit(signed, verified)

    if failure:
        click.echo(f"Error: {failure}", err=True)
        sys.exit(1)


def _audit_as_dict(audit: Audit, verified: bool | None) -> dict:
    audit = with_defaults(audit)
    verdict = field_value(audit.verdict)
    return {
        "package": {
            "name": audit.package.name,
            "version": audit.package.version,
            "ecosystem": field_value(audit.package.ecosystem),
        },
        "verdict": verdict.value if verdict else None,
        "message": field_value(audit.message),
        "public_key_fingerprint": audit.public_key_fingerprint,
        "created_at": audit.created_at,
        "audited_by_author": audit.audited_by_author,
        "signature_valid": verified,
    }
