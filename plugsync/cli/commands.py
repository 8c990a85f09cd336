"""
plugsync CLI - Commands

Commands:
    sync - Install or upgrade every configured plugin
    list - Show the installed version of every configured plugin
"""

from __future__ import annotations

import asyncio
from enum import Enum

import typer
from rich.markup import escape
from rich.table import Table

from plugsync.cli import CLIState, app, console
from plugsync.config.registries import load_registries
from plugsync.errors import ConfigError, PluginSyncError
from plugsync.install.manifest import InstalledVersionReader
from plugsync.models import Registry
from plugsync.orchestrator import SyncReport, UpgradeOrchestrator
from plugsync.registry.client import RegistryClient

EXIT_FAILURES = 1
EXIT_CONFIG = 2


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def _load(state: CLIState) -> list[Registry]:
    from plugsync.cli.output import print_error

    try:
        return load_registries(state.config_path, state.target_dir)
    except ConfigError as exc:
        print_error(escape(exc.message), details=escape(exc.context) if exc.context else None)
        raise typer.Exit(EXIT_CONFIG)


async def run_sync(
    registries: list[Registry],
    timeout: float | None,
    dry_run: bool = False,
) -> SyncReport:
    """Run one orchestrator pass over *registries* with a fresh HTTP client."""
    async with RegistryClient(timeout=timeout) as client:
        orchestrator = UpgradeOrchestrator(client, dry_run=dry_run)
        return await orchestrator.run(registries)


@app.command("sync")
def sync_plugins(
    ctx: typer.Context,
    check: bool = typer.Option(
        False,
        "--check",
        help="Only check for updates, don't download or install.",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format: table, json.",
    ),
) -> None:
    """
    Install or upgrade every configured plugin.

    All plugins of all registries are processed concurrently. A failing
    plugin is reported but never stops the others; the exit code is 1 when
    at least one plugin failed.
    """
    from plugsync.cli.output import print_json, print_report, print_success, print_warning

    state: CLIState = ctx.obj
    registries = _load(state)

    report = asyncio.run(run_sync(registries, state.settings.http_timeout, dry_run=check))

    if format == OutputFormat.JSON:
        print_json([outcome.to_dict() for outcome in report.outcomes])
    else:
        print_report(report, title="Available Updates" if check else "Plugin Sync")
        console.print()
        if report.ok:
            print_success("All plugins processed")
        else:
            print_warning(f"{len(report.failed)} plugin(s) failed")

    if not report.ok:
        raise typer.Exit(EXIT_FAILURES)


@app.command("list")
def list_plugins(ctx: typer.Context) -> None:
    """
    Show the installed version of every configured plugin.

    Only local manifests are read; no registry is contacted.
    """
    state: CLIState = ctx.obj
    registries = _load(state)
    reader = InstalledVersionReader()

    async def _collect() -> list[tuple[str, str, str]]:
        async def _row(registry: Registry, name: str) -> tuple[str, str, str]:
            try:
                version = await reader.read(registry.spec.install_dir, name)
            except PluginSyncError as exc:
                return registry.spec.registry, name, f"[red]{escape(str(exc))}[/red]"
            if version is None:
                return registry.spec.registry, name, "[dim]not installed[/dim]"
            return registry.spec.registry, name, f"[green]{version}[/green]"

        return await asyncio.gather(
            *(_row(registry, entry.name) for registry in registries for entry in registry.entries)
        )

    rows = asyncio.run(_collect())

    table = Table(title=f"Installed Plugins ({state.target_dir})")
    table.add_column("Registry", style="cyan")
    table.add_column("Plugin", style="cyan")
    table.add_column("Version", overflow="fold")
    for row in rows:
        table.add_row(*row)
    console.print(table)
