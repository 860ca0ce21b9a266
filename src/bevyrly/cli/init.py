"""bevyrly init command - write a project config file."""

from pathlib import Path

import click

from bevyrly.config.user_config import DEFAULT_SOURCE_FOLDER, UserConfig, write_user_config
from bevyrly.core.progress import status


def initialize_project(
    root: Path, *, source_folder: str = DEFAULT_SOURCE_FOLDER, force: bool = False
) -> bool:
    """Create .bevyrly/config.yaml under ``root``, returning True on success."""
    bevyrly_dir = root / ".bevyrly"
    config_path = bevyrly_dir / "config.yaml"

    if config_path.exists() and not force:
        status(f"Already initialized: {bevyrly_dir}", style="info")
        status("Use --force to overwrite the config", style="info")
        return False

    bevyrly_dir.mkdir(exist_ok=True)
    write_user_config(config_path, UserConfig(source_folder=source_folder))

    if not (root / source_folder).is_dir():
        status(f"Source folder does not exist yet: {root / source_folder}", style="warning")

    status(f"Wrote {config_path}", style="success")
    return True


@click.command()
@click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--source-folder",
    default=DEFAULT_SOURCE_FOLDER,
    show_default=True,
    help="Folder to catalog, relative to PATH",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config")
def init_command(path: Path, source_folder: str, force: bool) -> None:
    """Initialize bevyrly for a Rust project.

    PATH is the project root (default: current directory).
    """
    initialize_project(path.resolve(), source_folder=source_folder, force=force)
