"""CLI interface for Milepost using Typer.

Usage:
    milepost roadmap init        # Create the data file
    milepost show                # Tree with progress and status
    milepost overview            # Summary counters
    milepost item status ID review
    milepost serve               # REST API

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (roadmap, item)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from pathlib import Path
from typing import Optional

import typer

from milepost import __version__
from milepost.config import get_settings
from milepost.interfaces.cli.commands import item, roadmap
from milepost.interfaces.cli.common import data_file_option
from milepost.log import configure_logging

app = typer.Typer(
    name="milepost",
    help="Roadmap tracking with derived progress and status checks",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"milepost version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default from MILEPOST_LOG_LEVEL)",
    ),
) -> None:
    """Milepost - a roadmap of axes, pipelines, phases and tasks.

    Progress rolls up from tasks to the root; status is set by hand and
    checked against progress.
    """
    configure_logging(log_level or get_settings().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(roadmap.app, name="roadmap")
app.add_typer(item.app, name="item")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================


@app.command("show")
def show(
    data_file: Optional[Path] = data_file_option(),
    ids: bool = typer.Option(False, "--ids", help="Show item ids"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Levels below the root to show"),
) -> None:
    """Display the tree (shortcut for 'roadmap show')."""
    roadmap.show(data_file=data_file, ids=ids, depth=depth)


@app.command("overview")
def overview(data_file: Optional[Path] = data_file_option()) -> None:
    """Show summary counters (shortcut for 'roadmap overview')."""
    roadmap.overview(data_file=data_file)


@app.command("serve")
def serve(
    data_file: Optional[Path] = data_file_option(),
    host: Optional[str] = typer.Option(None, "--host", help="Bind host"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
) -> None:
    """Run the REST API server (shortcut for 'roadmap serve')."""
    roadmap.serve(data_file=data_file, host=host, port=port)


__all__ = ["app"]
