"""Database CLI commands."""

from __future__ import annotations

from typing import Tuple

import click
from rich.markup import escape
from rich.table import Table

from dblink.cli.utils import coerce_parameters, console, print_failure
from dblink.config import get_config
from dblink.db import ConnectionManager, EffectResult, QueryExecutor
from dblink.exceptions import ConfigurationError


def _open_manager(ctx: click.Context) -> ConnectionManager:
    """Build and open a manager for the database selected with ``--db``."""
    try:
        config = get_config(ctx.obj.get('config'), reload=True)
        db_config = config.get_database(ctx.obj.get('db'))
    except ConfigurationError as exc:
        console.print(f"[red]Configuration Error: {exc}[/red]")
        raise SystemExit(1) from exc
    except KeyError as exc:
        console.print(f"[red]Database '{exc.args[0]}' not found in configuration[/red]")
        raise SystemExit(1) from exc

    manager = ConnectionManager.from_config(db_config)
    status = manager.open()
    if not status:
        print_failure("Connection failed", status.error)
        raise SystemExit(1)
    return manager


@click.command(name="ping")
@click.pass_context
def ping_command(ctx: click.Context) -> None:
    """Open a connection, report liveness, then close it."""
    manager = _open_manager(ctx)

    table = Table(show_header=False, box=None)
    table.add_column("Property", style="cyan", width=15)
    table.add_column("Value", style="green")
    table.add_row("Database:", repr(manager))
    table.add_row("Driver:", manager.adapter.get_driver_name())
    table.add_row("Alive:", str(manager.is_connected()))
    table.add_row("Session:", str(manager.session_id))
    console.print(table)

    manager.close()


@click.command(name="query")
@click.argument("statement")
@click.option("--param", "-p", "params", multiple=True, help="Positional parameter for a ? placeholder")
@click.pass_context
def query_command(ctx: click.Context, statement: str, params: Tuple[str, ...]) -> None:
    """Execute STATEMENT and show its rows or effect."""
    manager = _open_manager(ctx)

    try:
        query = QueryExecutor(manager, statement, coerce_parameters(params)).execute()
    finally:
        manager.close()

    if not query.status:
        print_failure("Query failed", query.status.error)
        raise SystemExit(1)

    if isinstance(query.outcome, EffectResult):
        console.print(
            f"[green]OK[/green] affected rows: {query.affected_rows}, insert id: {query.insert_id}"
        )
        return

    table = Table(show_header=True, header_style="bold magenta")
    for column in query.columns:
        table.add_column(column)
    for row in query.get_result():
        table.add_row(*(escape(str(row[column])) for column in query.columns))

    console.print(table)
    console.print(f"\n{query.num_rows} row(s) in {query.execution_time:.3f}s")
