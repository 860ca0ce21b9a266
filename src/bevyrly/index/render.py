"""Text rendering of query results.

Short mode prints one ``name  path:line`` line per system. Long mode prints
each declaration, optionally with its body elided, under a
``/* path:start-end */`` header. Systems the index no longer knows render
as nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bevyrly.index.models import QueryMode, QueryResult

if TYPE_CHECKING:
    from bevyrly.index.ops import IndexCoordinator

ELIDED_BODY = "{ /* ... */ }"


def elide_body(declaration: str) -> str:
    """Replace everything from the first ``{`` on with an elided body."""
    brace = declaration.find("{")
    if brace < 0:
        return declaration
    return declaration[:brace] + ELIDED_BODY


def short_line(coordinator: IndexCoordinator, system: str) -> str | None:
    link = coordinator.link_of(system)
    if link is None:
        return None
    return f"{system}  {link}"


def long_header(coordinator: IndexCoordinator, system: str) -> str | None:
    span = coordinator.location_of(system)
    if span is None:
        return None
    path = coordinator.relative_path(span.path)
    return f"/* {path}:{span.start_line}-{span.end_line} */"


def long_block(
    coordinator: IndexCoordinator,
    system: str,
    *,
    with_header: bool = True,
    elide: bool = False,
) -> str | None:
    """Full declaration text of a system, or None when unknown."""
    header = long_header(coordinator, system)
    if header is None:
        return None
    text = coordinator.declaration_text_of(system)
    if elide:
        text = elide_body(text)
    return f"{header}\n{text}" if with_header else text


def render_result(
    coordinator: IndexCoordinator, result: QueryResult, *, elide: bool = False
) -> str:
    """Render a whole result as plain text in the result's mode."""
    blocks: list[str] = []
    for system in result.systems:
        if result.mode is QueryMode.LONG:
            block = long_block(coordinator, system, elide=elide)
        else:
            block = short_line(coordinator, system)
        if block is not None:
            blocks.append(block)

    separator = "\n\n" if result.mode is QueryMode.LONG else "\n"
    return separator.join(blocks)
