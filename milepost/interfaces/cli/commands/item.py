"""Item CLI commands.

Commands that change a single item: adding, removing, editing, status and
progress changes, validation. Each loads the stored tree, applies one
session operation and saves the tree back.
"""

from pathlib import Path
from typing import Optional

import typer

from milepost.application import ItemUpdate, RoadmapSession
from milepost.domain.roadmap import NodeStatus, NodeType, describe
from milepost.domain.shared import Err, Result
from milepost.infrastructure.storage import RoadmapRepository
from milepost.interfaces.cli.common import (
    data_file_option,
    open_session,
    print_error,
    print_success,
    print_warning,
    save_session,
)

app = typer.Typer(help="Item commands")


def _commit(
    repository: RoadmapRepository,
    session: RoadmapSession,
    result: Result,
    message: str,
) -> None:
    """Save after a successful operation, or report the failure."""
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    save_session(repository, session)
    print_success(message)


def _warn_if_divergent(session: RoadmapSession, item_id: str) -> None:
    node = session.get(item_id)
    if node is None:
        return
    insight = describe(node)
    if insight.divergent:
        print_warning(
            f"'{insight.title}' is {insight.status.value} at {insight.progress}%; "
            f"suggested status: {insight.suggested_status.value}"
        )


@app.command("add-axis")
def add_axis(
    title: str = typer.Argument(..., help="Axis title"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Add a top-level axis."""
    repository, session = open_session(data_file)
    result = session.add_axis(title)
    _commit(repository, session, result, f"Added axis: {title}")
    typer.echo(result.value.id)


@app.command("add")
def add(
    parent_id: str = typer.Argument(..., help="Parent item id"),
    title: str = typer.Argument(..., help="Item title"),
    node_type: NodeType = typer.Option(NodeType.PIPELINE, "--type", "-t", help="Item kind"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Add an item under a parent."""
    repository, session = open_session(data_file)
    result = session.add_sub_item(parent_id, title, node_type)
    _commit(repository, session, result, f"Added {node_type.value}: {title}")
    typer.echo(result.value.id)


@app.command("remove")
def remove(
    item_id: str = typer.Argument(..., help="Item id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Delete an item and everything below it."""
    repository, session = open_session(data_file)
    node = session.get(item_id)
    if node is not None and not yes:
        typer.confirm(f"Delete '{node.title}' and all its sub-items?", abort=True)
    result = session.delete_item(item_id)
    _commit(repository, session, result, f"Deleted: {item_id}")


@app.command("edit")
def edit(
    item_id: str = typer.Argument(..., help="Item id"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    weight: Optional[float] = typer.Option(None, "--weight", help="Weight in the parent's average"),
    validated: Optional[bool] = typer.Option(None, "--validated/--not-validated", help="Validated flag"),
    start_date: Optional[str] = typer.Option(None, "--start", help="Start date (ISO)"),
    end_date: Optional[str] = typer.Option(None, "--end", help="End date (ISO)"),
    weeks: Optional[float] = typer.Option(None, "--weeks", help="Estimated duration in weeks"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Edit descriptive fields of an item."""
    fields = {
        "title": title,
        "description": description,
        "progress_weight": weight,
        "validated": validated,
        "start_date": start_date,
        "end_date": end_date,
        "estimated_weeks": weeks,
    }
    provided = {key: value for key, value in fields.items() if value is not None}
    if not provided:
        print_error("Nothing to change.")
        raise typer.Exit(1)
    if weight is not None and weight <= 0:
        print_error("Weight must be positive.")
        raise typer.Exit(1)

    repository, session = open_session(data_file)
    result = session.edit_item(item_id, ItemUpdate(**provided))
    _commit(repository, session, result, f"Updated: {item_id}")


@app.command("status")
def status(
    item_id: str = typer.Argument(..., help="Item id"),
    new_status: NodeStatus = typer.Argument(..., help="New status"),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Refuse transitions that are not offered (default from MILEPOST_STRICT_TRANSITIONS)",
    ),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Set the status of an item."""
    repository, session = open_session(data_file, strict=strict)
    result = session.set_status(item_id, new_status)
    _commit(repository, session, result, f"Status of {item_id}: {new_status.value}")
    _warn_if_divergent(session, item_id)


# Negative values such as -5 are taken as the value, not as options.
@app.command("progress", context_settings={"ignore_unknown_options": True})
def progress(
    item_id: str = typer.Argument(..., help="Item id"),
    value: str = typer.Argument(..., help="Progress 0-100 (clamped)"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Set the stored progress of an item."""
    repository, session = open_session(data_file)
    result = session.set_progress(item_id, value)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    _commit(repository, session, result, f"Progress of {item_id}: {result.value.progress}%")
    _warn_if_divergent(session, item_id)


@app.command("reset-progress")
def reset_progress(
    item_id: str = typer.Argument(..., help="Item id"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Clear the stored progress so it is derived from sub-items again."""
    repository, session = open_session(data_file)
    result = session.reset_progress(item_id)
    _commit(repository, session, result, f"Progress of {item_id} is now derived")


@app.command("override", context_settings={"ignore_unknown_options": True})
def override(
    item_id: str = typer.Argument(..., help="Item id"),
    value: Optional[str] = typer.Argument(None, help="Override 0-100; omit to clear"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Set or clear the progress override of an item."""
    repository, session = open_session(data_file)
    result = session.set_override(item_id, value)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)

    if value is None:
        message = f"Override of {item_id} cleared"
    else:
        message = f"Override of {item_id}: {result.value.progress_override}%"
    _commit(repository, session, result, message)


@app.command("validate")
def validate(
    item_id: str = typer.Argument(..., help="Item id"),
    task: bool = typer.Option(False, "--task", help="Also set progress to 100/0 like a task checkbox"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Toggle the validated flag of an item."""
    repository, session = open_session(data_file)
    result = session.toggle_task_validation(item_id) if task else session.toggle_validation(item_id)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)

    state = "validated" if result.value.validated else "not validated"
    _commit(repository, session, result, f"{item_id} is {state}")
