"""Rich output formatting helpers for the hexprove CLI.

Status Color Mapping:
    HONEST / ABSOLVED = green, UNRESOLVED = yellow, CORRUPT = bold red
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from hexprove.core.audit import DEFAULT_ECOSYSTEM, Audit, SignedAudit, field_value
from hexprove.core.check import (
    CheckResult,
    CheckStatus,
    evaluate_status,
    located_by,
    repo_label,
    status_label,
)

_STATUS_STYLES: dict[CheckStatus, str] = {
    CheckStatus.HONEST: "green",
    CheckStatus.ABSOLVED: "green",
    CheckStatus.UNRESOLVED: "yellow",
    CheckStatus.CORRUPT: "bold red",
}

console = Console()


def status_style(status: CheckStatus) -> str:
    """Return the Rich style string for a check status."""
    return _STATUS_STYLES.get(status, "white")


def print_check_results(results: list[CheckResult]) -> None:
    """Print one table row per checked package, then a summary line.

    Args:
        results: Check results in the order the packages were given.
    """
    if not results:
        console.print("[dim]No packages checked.[/dim]")
        return

    table = Table(title="hexprove Check Results", show_header=True, header_style="bold")
    table.add_column("Dependency", style="bold")
    table.add_column("Version")
    table.add_column("Github")
    table.add_column("LocatedBy", style="dim")
    table.add_column("Status")

    for result in results:
        status = evaluate_status(result)
        table.add_row(
            result.hex_package.name,
            result.hex_package.version,
            repo_label(result),
            located_by(result),
            Text(status_label(result, status), style=status_style(status)),
        )

    console.print(table)
    _print_check_summary(results)


def _print_check_summary(results: list[CheckResult]) -> None:
    """Print a one-line count per status after the results table."""
    counts = {status: 0 for status in CheckStatus}
    for result in results:
        counts[evaluate_status(result)] += 1
    parts = [f"[bold]{len(results)}[/bold] packages checked"]
    for status in CheckStatus:
        if counts[status]:
            style = status_style(status)
            parts.append(f"[{style}]{counts[status]} {status.value}[/{style}]")
    console.print(" | ".join(parts))


def print_error_reasons(results: list[CheckResult]) -> None:
    """Print the diagnostic reason of every package that stopped early."""
    for result in results:
        if result.error_reason:
            console.print(
                f"  [yellow]{result.hex_package.name}[/yellow]: {escape(result.error_reason)}"
            )


def print_signed_audit(signed: SignedAudit, verified: bool | None) -> None:
    """Print a decoded signed audit.

    Args:
        signed: The decoded audit.
        verified: True/False for a checked signature, None if unchecked.
    """
    audit = signed.audit
    package = audit.package
    header = Text.assemble(
        ("Package: ", "bold"), (f"{package.name} {package.version}", ""),
        ("  Ecosystem: ", "bold"), (audit_ecosystem(audit), "dim"),
    )
    console.print(Panel(header, title="Signed Audit"))

    verdict = field_value(audit.verdict)
    console.print(f"  Verdict:     {verdict.value if verdict else '-'}")
    console.print(f"  Message:     {escape(field_value(audit.message, '-'))}")
    console.print(f"  Signed by:   {audit.public_key_fingerprint}")
    console.print(f"  By author:   {'yes' if audit.audited_by_author else 'no'}")
    console.print(f"  Created at:  {audit.created_at}")
    if verified is None:
        console.print("  Signature:   [dim]not checked[/dim]")
    elif verified:
        console.print("  Signature:   [bold green]valid[/bold green]")
    else:
        console.print("  Signature:   [bold red]INVALID[/bold red]")


def audit_ecosystem(audit: Audit) -> str:
    """Ecosystem of the audited package, with the default filled in."""
    return field_value(audit.package.ecosystem, DEFAULT_ECOSYSTEM)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout.

    Args:
        data: Any JSON-serializable data structure.
    """
    console.print_json(json.dumps(data, default=str))
