"""bevyrly index command - rebuild the index and report statistics."""

import json
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from bevyrly.cli.utils import build_index, find_project_root, load_project_config
from bevyrly.core.progress import get_console, pluralize, status
from bevyrly.index.models import Category


@click.command()
@click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "-d", "--diagnostics", "show_diagnostics", is_flag=True, help="List every diagnostic"
)
@click.pass_context
def index_command(ctx: click.Context, path: Path, as_json: bool, show_diagnostics: bool) -> None:
    """Index the systems of a Rust project and show what was found.

    PATH is the project root (default: current directory).
    """
    root = find_project_root(path)
    config = load_project_config(ctx, root)
    coordinator, stats = build_index(root, config, quiet=as_json)

    if as_json:
        click.echo(json.dumps(stats.to_dict(), indent=2))
        return

    status(
        f"Indexed {pluralize(stats.systems, 'system')} from "
        f"{pluralize(stats.files_parsed, 'file')} in {stats.duration_seconds:.2f}s",
        style="success",
    )
    if stats.files_skipped:
        status(f"Skipped {pluralize(stats.files_skipped, 'file')}", style="warning")

    table = Table(title="Identifiers per category")
    table.add_column("Category")
    table.add_column("Identifiers", justify="right")
    for category in Category:
        table.add_row(category.value, str(stats.identifiers.get(category.value, 0)))
    get_console().print(table)

    if not stats.diagnostics:
        return
    status(f"{pluralize(len(stats.diagnostics), 'diagnostic')}", style="warning")
    if show_diagnostics:
        for diag in stats.diagnostics:
            location = coordinator.relative_path(diag.path) if diag.path else "-"
            system = f" [{diag.system}]" if diag.system else ""
            status(escape(f"{diag.code.name} {location}{system}: {diag.message}"), indent=2)
