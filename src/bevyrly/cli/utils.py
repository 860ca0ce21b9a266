"""CLI utilities."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from bevyrly.config import BevyrlyConfig, load_config
from bevyrly.core.errors import ConfigError, ParseError
from bevyrly.core.logging import configure_logging
from bevyrly.core.progress import spinner
from bevyrly.index.models import IndexStats
from bevyrly.index.ops import IndexCoordinator

PROJECT_MARKERS = ("Cargo.toml", ".bevyrly")


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the Rust project root from the given path.

    Walks up the directory tree looking for Cargo.toml or a .bevyrly
    directory. Falls back to the start path itself when neither is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    start = start_path.resolve()
    current = start
    while True:
        if any((current / marker).exists() for marker in PROJECT_MARKERS):
            return current
        if current == current.parent:
            return start
        current = current.parent


def load_project_config(ctx: click.Context, root: Path) -> BevyrlyConfig:
    """Load config for ``root`` and apply its logging section.

    Raises:
        click.ClickException: On invalid configuration.
    """
    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)
    return config


def build_index(
    root: Path, config: BevyrlyConfig, *, quiet: bool = False
) -> tuple[IndexCoordinator, IndexStats]:
    """Run one full rebuild of ``root`` and return the coordinator with its stats.

    Raises:
        click.ClickException: When the Rust grammar is unavailable.
    """
    coordinator = IndexCoordinator(config.index)
    try:
        if quiet:
            stats = asyncio.run(coordinator.rebuild([root]))
        else:
            with spinner("Indexing systems"):
                stats = asyncio.run(coordinator.rebuild([root]))
    except ParseError as e:
        raise click.ClickException(str(e)) from e
    return coordinator, stats
