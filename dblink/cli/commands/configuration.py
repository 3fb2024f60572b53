"""Configuration management CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from dblink.cli.utils import console
from dblink.config import create_sample_config, validate_config_file
from dblink.exceptions import ConfigurationError


@click.group(name="config")
def config_group() -> None:
    """Configuration management."""
    pass


@config_group.command(name="validate")
@click.argument("config_file", type=click.Path(exists=True))
def validate_command(config_file: str) -> None:
    """Validate configuration file."""
    try:
        config = validate_config_file(config_file)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration validation failed: {exc}[/red]")
        raise SystemExit(1) from exc

    console.print(f"[green]Configuration file '{config_file}' is valid[/green]")
    console.print(f"Found {len(config.databases)} database(s): {', '.join(config.databases.keys())}")
    console.print(f"Default database: [cyan]{config.default_database}[/cyan]")


@config_group.command(name="sample")
@click.argument("output_file", type=click.Path())
def sample_command(output_file: str) -> None:
    """Create sample configuration file."""
    output_path = Path(output_file)
    if output_path.exists():
        click.confirm(f"File '{output_file}' exists. Overwrite?", abort=True)

    try:
        create_sample_config(output_path)
    except OSError as exc:
        console.print(f"[red]Error creating sample configuration: {exc}[/red]")
        raise SystemExit(1) from exc

    console.print(f"[green]Sample configuration created: {output_file}[/green]")
    console.print(f"Validate it with: [cyan]dblink config validate {output_file}[/cyan]")
