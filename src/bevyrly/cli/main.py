"""bevyrly CLI - bevyrly command."""

import click

from bevyrly import __version__
from bevyrly.cli.index import index_command
from bevyrly.cli.init import init_command
from bevyrly.cli.query import query_command
from bevyrly.cli.syntax import syntax_command
from bevyrly.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="bevyrly")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """bevyrly - find Bevy systems by the components, resources and events they use."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(init_command, name="init")
cli.add_command(index_command, name="index")
cli.add_command(query_command, name="query")
cli.add_command(syntax_command, name="syntax")


if __name__ == "__main__":
    cli()
