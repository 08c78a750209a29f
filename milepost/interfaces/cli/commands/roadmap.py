"""Whole-roadmap CLI commands.

Commands that look at or operate on the tree as a whole: creating the data
file, displaying the tree and its summary, migration, export and serving
the REST API.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree as RichTree

from milepost.config import get_settings
from milepost.domain.roadmap import (
    Node,
    backfill_defaults,
    compute_progress,
    effective_status,
    is_divergent,
    needs_migration,
)
from milepost.domain.shared import Err
from milepost.infrastructure.storage import RoadmapRepository
from milepost.interfaces.cli.common import (
    STATUS_ICONS,
    data_file_option,
    format_insight,
    open_session,
    print_error,
    print_header,
    print_info,
    print_success,
    resolve_data_file,
    save_session,
)

app = typer.Typer(help="Whole-roadmap commands")


# =============================================================================
# Output Formatting Helpers
# =============================================================================


def node_label(node: Node, show_ids: bool = False) -> str:
    """Rich markup label: status icon, title, progress, divergence flag."""
    label = (
        f"{STATUS_ICONS[effective_status(node)]} {escape(node.title)} "
        f"[bold]{compute_progress(node)}%[/bold]"
    )
    if is_divergent(node):
        label += " [red]divergent[/red]"
    if show_ids:
        label += f" [dim]({node.id})[/dim]"
    return label


def build_rich_tree(root: Node, show_ids: bool = False, depth: int | None = None) -> RichTree:
    """Mirror the roadmap as a rich tree, optionally cut at ``depth`` levels."""
    tree = RichTree(node_label(root, show_ids))

    def add_children(branch: RichTree, node: Node, level: int) -> None:
        if depth is not None and level >= depth:
            return
        for child in node.children:
            add_children(branch.add(node_label(child, show_ids)), child, level + 1)

    add_children(tree, root, 0)
    return tree


# =============================================================================
# Commands
# =============================================================================


@app.command("init")
def init(
    data_file: Optional[Path] = data_file_option(),
    empty: bool = typer.Option(False, "--empty", help="Start with no axes instead of the sample roadmap"),
) -> None:
    """Create the data file if needed and backfill missing fields."""
    settings = get_settings()
    repository = RoadmapRepository(resolve_data_file(data_file))
    existed = repository.exists()

    result = repository.initialize(settings.default_title, seed=not empty)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)

    if existed:
        print_info(f"Roadmap already present at {repository.data_file}")
    else:
        print_success(f"Created roadmap at {repository.data_file}")


@app.command("show")
def show(
    data_file: Optional[Path] = data_file_option(),
    ids: bool = typer.Option(False, "--ids", help="Show item ids"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Levels below the root to show"),
) -> None:
    """Display the roadmap tree with progress and status."""
    _, session = open_session(data_file)
    console = Console()
    console.print(build_rich_tree(session.root, show_ids=ids, depth=depth))


@app.command("overview")
def overview(data_file: Optional[Path] = data_file_option()) -> None:
    """Show summary counters for the roadmap."""
    _, session = open_session(data_file)
    stats = session.overview()

    print_header(session.root.title)
    typer.echo(f"Overall progress:  {stats.overall_progress}%")
    typer.echo(
        f"Validated items:   {stats.validated_items} / {stats.total_items} ({stats.validated_percent}%)"
    )
    typer.echo(f"Active axes:       {stats.active_axes} / {stats.total_axes} ({stats.active_percent}%)")
    typer.echo(f"Divergent items:   {stats.divergent_items}")


@app.command("inspect")
def inspect(
    item_id: str = typer.Argument(..., help="Item id"),
    data_file: Optional[Path] = data_file_option(),
) -> None:
    """Show derived progress and status information for one item."""
    _, session = open_session(data_file)
    result = session.insight(item_id)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    typer.echo(f"Path:        {' > '.join(n.title for n in session.breadcrumbs(item_id))}")
    typer.echo(format_insight(result.value))


@app.command("divergent")
def divergent(data_file: Optional[Path] = data_file_option()) -> None:
    """List items whose status disagrees with their progress."""
    _, session = open_session(data_file)
    items = session.divergent_nodes()
    if not items:
        print_success("No divergent items.")
        return

    typer.echo(f"{len(items)} divergent item(s):\n")
    for insight in items:
        typer.echo(
            f"- {insight.title} ({insight.id}): {insight.status.value} at {insight.progress}%, "
            f"suggested {insight.suggested_status.value}"
        )


@app.command("migrate")
def migrate(data_file: Optional[Path] = data_file_option()) -> None:
    """Backfill missing statuses and progress weights."""
    repository, session = open_session(data_file)
    if not needs_migration(session.root):
        print_info("Nothing to migrate.")
        return

    touched = backfill_defaults(session.root)
    save_session(repository, session)
    print_success(f"Migrated {touched} item(s).")


@app.command("export")
def export(
    data_file: Optional[Path] = data_file_option(),
    output: Path = typer.Option(Path("roadmap-export.json"), "--output", "-o", help="Export file"),
) -> None:
    """Write the roadmap to a standalone JSON file."""
    _, session = open_session(data_file)
    output.write_text(json.dumps(session.export_document(), indent=2, ensure_ascii=False), encoding="utf-8")
    print_success(f"Roadmap exported to {output}")


@app.command("serve")
def serve(
    data_file: Optional[Path] = data_file_option(),
    host: Optional[str] = typer.Option(None, "--host", help="Bind host"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
) -> None:
    """Run the REST API server."""
    import uvicorn

    from milepost.interfaces.api import create_app

    settings = get_settings()
    overrides = {
        key: value
        for key, value in {"data_file": data_file, "host": host, "port": port}.items()
        if value is not None
    }
    settings = settings.model_copy(update=overrides)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
