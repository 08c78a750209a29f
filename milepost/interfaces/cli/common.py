"""Shared utilities for Milepost CLI commands.

- Data file resolution and session loading/saving
- Formatted output helpers (error, success, info, warning)
- Status and progress formatting for display
"""

from pathlib import Path
from typing import Optional

import typer

from milepost.application import RoadmapSession
from milepost.config import get_settings
from milepost.domain.roadmap import NodeInsight, NodeStatus
from milepost.domain.shared import Err
from milepost.infrastructure.storage import RoadmapRepository

DATA_FILE_HELP = "Roadmap JSON file (or set MILEPOST_DATA_FILE env var)"

# Rich markup per status, used by the tree display.
STATUS_ICONS = {
    NodeStatus.NOT_STARTED: "[dim][ ][/dim]",
    NodeStatus.IN_PROGRESS: "[yellow][~][/yellow]",
    NodeStatus.REVIEW: "[cyan][?][/cyan]",
    NodeStatus.COMPLETED: r"[green]\[x][/green]",
    NodeStatus.BLOCKED: "[red][!][/red]",
}


def data_file_option() -> Optional[Path]:
    return typer.Option(
        None,
        "--data-file",
        "-f",
        help=DATA_FILE_HELP,
        envvar="MILEPOST_DATA_FILE",
    )


def resolve_data_file(explicit: Path | None) -> Path:
    """Explicit option first, then configured settings."""
    return explicit or get_settings().data_file


def open_session(
    data_file: Path | None,
    strict: bool | None = None,
) -> tuple[RoadmapRepository, RoadmapSession]:
    """Load the stored roadmap into a session.

    Raises:
        typer.Exit: If the data file cannot be read.
    """
    repository = RoadmapRepository(resolve_data_file(data_file))
    result = repository.load()
    if isinstance(result, Err):
        print_error(result.error)
        typer.echo("Create one with: milepost roadmap init", err=True)
        raise typer.Exit(1)

    if strict is None:
        strict = get_settings().strict_transitions
    return repository, RoadmapSession(result.value.roadmap, strict_transitions=strict)


def save_session(repository: RoadmapRepository, session: RoadmapSession) -> None:
    """Write the session's tree back, exiting on failure."""
    result = repository.save(session.root)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)


def print_error(msg: str) -> None:
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a title between two separator lines."""
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def format_insight(insight: NodeInsight) -> str:
    """Multi-line description of a node's derived state."""
    allowed = ", ".join(s.value for s in insight.allowed_transitions) or "-"
    lines = [
        f"Item:        {insight.title} ({insight.id})",
        f"Progress:    {insight.progress}% ({insight.source.value})",
        f"Status:      {insight.status.value}",
        f"Divergent:   {'yes' if insight.divergent else 'no'}",
        f"Suggested:   {insight.suggested_status.value}",
        f"Allowed:     {allowed}",
    ]
    return "\n".join(lines)


__all__ = [
    "STATUS_ICONS",
    "data_file_option",
    "format_insight",
    "open_session",
    "print_error",
    "print_header",
    "print_info",
    "print_separator",
    "print_success",
    "print_warning",
    "resolve_data_file",
    "save_session",
]
