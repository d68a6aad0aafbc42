"""hexprove CLI — Verify that Hex packages match their published source.

Entry point for the ``hexprove`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    check   — Diff packages against the source revision of their version.
    absolve — Trust one package tarball despite a mismatch.
    key     — Generate or show the local audit signing key.
    audit   — Create and inspect signed audits.

Usage::

    hexprove check -p jason 1.4.1 <hash>
    hexprove check --packages-file packages.yaml --format json
    hexprove absolve jason <hash> "generated files differ only"
    hexprove key generate
    hexprove audit create jason 1.4.1 --verdict lgtm -m "reviewed"
    hexprove audit show jason-1.4.1.audit --public-key key.pub.pem
"""

from __future__ import annotations

import logging

import click

from hexprove import __version__
from hexprove.cli.absolve_cmd import absolve_command
from hexprove.cli.audit_cmd import audit_group
from hexprove.cli.check_cmd import check_command
from hexprove.cli.key_cmd import key_group


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
def cli(verbose: bool) -> None:
    """hexprove: check that Hex dependencies match their GitHub source.

    Each package is compared file by file against the revision of its
    repository that carries the locked version. Mismatches can be
    absolved, and reviews can be shared as signed audits.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(check_command)
cli.add_command(absolve_command)
cli.add_command(key_group)
cli.add_command(audit_group)
