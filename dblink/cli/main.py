"""Main CLI entry point for dblink."""

from __future__ import annotations

import click

from dblink import __version__
from dblink.cli.commands import register_commands
from dblink.cli.commands.configuration import config_group
from dblink.cli.commands.database import ping_command, query_command
from dblink.cli.utils import console, setup_logging


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.option("--config", type=click.Path(exists=True), help="Path to configuration file")
@click.option("--db", help="Database connection name")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    config: str,
    db: str,
    verbose: bool,
) -> None:
    """dblink - run statements over a single database connection."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "config": config,
            "db": db,
            "verbose": verbose,
        }
    )
    setup_logging(verbose)

    if version:
        console.print(f"dblink v{__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


COMMAND_REGISTRY = [
    ping_command,
    query_command,
    config_group,
]

register_commands(cli, COMMAND_REGISTRY)


if __name__ == "__main__":
    cli()
