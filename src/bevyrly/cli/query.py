"""bevyrly query command - find systems by the data they access."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.syntax import Syntax

from bevyrly.cli.utils import build_index, find_project_root, load_project_config
from bevyrly.core.progress import status
from bevyrly.index.models import QueryMode
from bevyrly.index.ops import IndexCoordinator
from bevyrly.index.render import long_block, long_header, render_result


def _system_payload(
    coordinator: IndexCoordinator, system: str, mode: QueryMode, elide: bool
) -> dict[str, Any] | None:
    span = coordinator.location_of(system)
    if span is None:
        return None
    payload: dict[str, Any] = {
        "name": system,
        "path": coordinator.relative_path(span.path),
        "start_line": span.start_line,
        "end_line": span.end_line,
    }
    if mode is QueryMode.LONG:
        payload["declaration"] = long_block(coordinator, system, with_header=False, elide=elide)
    return payload


@click.command(epilog="Queries starting with '-' must follow '--': bevyrly query -- '-Tag'")
@click.argument("query")
@click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--signatures", is_flag=True, help="Elide function bodies in long mode")
@click.option("--plain", is_flag=True, help="Print long mode without syntax highlighting")
@click.pass_context
def query_command(
    ctx: click.Context,
    query: str,
    path: Path,
    as_json: bool,
    signatures: bool,
    plain: bool,
) -> None:
    """Find systems matching QUERY.

    PATH is the project root (default: current directory). Run
    'bevyrly syntax' for the query language.
    """
    root = find_project_root(path)
    config = load_project_config(ctx, root)
    coordinator, _ = build_index(root, config, quiet=as_json)

    result = coordinator.query(query)
    elide = signatures or config.display.elide_bodies

    if as_json:
        systems = [_system_payload(coordinator, s, result.mode, elide) for s in result.systems]
        click.echo(
            json.dumps(
                {
                    "query": query,
                    "mode": result.mode.value,
                    "systems": [s for s in systems if s is not None],
                },
                indent=2,
            )
        )
        return

    if not result.systems:
        status("No matching systems", style="warning")
        return

    if plain or result.mode is QueryMode.SHORT:
        click.echo(render_result(coordinator, result, elide=elide))
        return

    console = Console()
    for system in result.systems:
        header = long_header(coordinator, system)
        text = long_block(coordinator, system, with_header=False, elide=elide)
        if header is None or text is None:
            continue
        console.print(header, style="dim", markup=False, highlight=False)
        console.print(Syntax(text, "rust", theme=config.display.theme, word_wrap=True))
        console.print()
