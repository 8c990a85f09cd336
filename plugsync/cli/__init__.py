"""
plugsync - Command Line Interface

Command line front end for keeping installed plugins in sync with their
registries. Built with Typer for argument handling and Rich for output.

Usage:
    $ plugsync --help
    $ plugsync sync
    $ plugsync sync --check --format json
    $ plugsync -c ./plugins.toml -t ./plugins list

Commands:
    sync - Install or upgrade every configured plugin
    list - Show the installed version of every configured plugin

For detailed help on any command:
    $ plugsync <command> --help
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from plugsync import __version__
from plugsync.config.settings import Settings, expand_path, get_settings

# Create main console for output
console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Create main application
app = typer.Typer(
    name="plugsync",
    help="plugsync - keep installed plugins in sync with their registries",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


@dataclass
class CLIState:
    """Options shared by every command."""

    settings: Settings
    config_path: Path
    target_dir: Path


def configure_logging(level: str | int) -> None:
    """Configure the root logger once per invocation."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"plugsync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Registry configuration file [default: $HOME/.theia/plugins.toml].",
    ),
    target: Optional[Path] = typer.Option(
        None,
        "--target",
        "-t",
        help="Plugin install directory [default: $HOME/.theia/plugins].",
    ),
) -> None:
    """
    plugsync - keep installed plugins in sync with their registries

    Reads the registry configuration, asks each registry for the latest
    version of every listed plugin and installs it when the local
    extension.vsixmanifest records a different version.
    """
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.PLUGSYNC_LOG_LEVEL)

    state = CLIState(
        settings=settings,
        config_path=expand_path(config_file) if config_file else settings.PLUGSYNC_CONFIG,
        target_dir=expand_path(target) if target else settings.PLUGSYNC_TARGET,
    )
    logging.getLogger(__name__).info("config=%s target=%s", state.config_path, state.target_dir)
    ctx.obj = state


def _register_subcommands() -> None:
    """Import command modules so they attach themselves to ``app``."""
    from plugsync.cli import commands  # noqa: F401


# Expose the app for use in submodules
__all__ = [
    "app",
    "console",
    "err_console",
    "CLIState",
    "configure_logging",
    "__version__",
]


_register_subcommands()


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
