"""bevyrly syntax command - describe the query language."""

import click

from bevyrly.index.query import QUERY_HELP


@click.command()
def syntax_command() -> None:
    """Show the query language reference."""
    click.echo(QUERY_HELP)
