"""
plugsync CLI - Rich Output Helpers

Utility functions for consistent command-line output using Rich.

Functions:
    print_json    - Print formatted JSON
    print_error   - Print error message
    print_success - Print success message
    print_warning - Print warning message
    print_report  - Print a sync report as a table
"""

from __future__ import annotations

import json
from typing import Optional

from rich.markup import escape
from rich.table import Table

from plugsync.cli import console, err_console
from plugsync.orchestrator import SyncReport, UnitStatus

STATUS_STYLES = {
    UnitStatus.SKIPPED: "dim",
    UnitStatus.INSTALLED: "green",
    UnitStatus.UPDATE_AVAILABLE: "yellow",
    UnitStatus.FAILED: "red",
}


def print_json(
    data: dict | list,
    indent: int = 2,
    sort_keys: bool = False,
) -> None:
    """
    Print formatted JSON.

    Output is written without markup or highlighting so that it can be
    piped into other tools.

    Args:
        data: Data to print as JSON
        indent: Indentation level
        sort_keys: Whether to sort dictionary keys
    """
    json_str = json.dumps(data, indent=indent, sort_keys=sort_keys, default=str)
    console.print(json_str, markup=False, highlight=False, soft_wrap=True)


def print_error(
    message: str,
    details: Optional[str] = None,
    hint: Optional[str] = None,
) -> None:
    """
    Print error message.

    Args:
        message: Error message
        details: Optional detailed error information
        hint: Optional hint for resolving the error
    """
    err_console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)

    if details:
        err_console.print(f"[dim]{details}[/dim]", highlight=False)

    if hint:
        err_console.print(f"[yellow]Hint:[/yellow] {hint}", highlight=False)


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_report(report: SyncReport, title: str = "Plugin Sync") -> None:
    """
    Print one row per unit followed by a status summary.

    Args:
        report: Outcomes of a sync run
        title: Table title
    """
    table = Table(title=title)
    table.add_column("Registry", style="cyan")
    table.add_column("Plugin", style="cyan")
    table.add_column("Installed")
    table.add_column("Latest")
    table.add_column("Status")
    table.add_column("Details", overflow="fold")

    for outcome in report.outcomes:
        style = STATUS_STYLES[outcome.status]
        table.add_row(
            outcome.registry,
            outcome.name,
            str(outcome.installed) if outcome.installed else "-",
            str(outcome.latest) if outcome.latest else "-",
            f"[{style}]{outcome.status.value}[/{style}]",
            escape(str(outcome.error)) if outcome.error else "",
        )

    console.print(table)

    summary = ", ".join(
        f"{count} {status.value}" for status, count in report.counts.items() if count
    )
    console.print(f"[dim]{summary or 'no plugins configured'}[/dim]")
