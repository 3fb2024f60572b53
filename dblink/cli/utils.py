"""Shared CLI utilities for dblink."""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

from rich.console import Console

from dblink.config import EnvironmentSettings
from dblink.exceptions import DatabaseError

# Single console instance reused across CLI modules
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging from ``DBLINK_LOG_LEVEL`` (DEBUG when verbose)."""
    settings = EnvironmentSettings()
    level = logging.DEBUG if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def coerce_parameter(value: str) -> Any:
    """Turn a command line string into an int, float or str, in that order."""
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    return value


def coerce_parameters(values: Sequence[str]) -> List[Any]:
    return [coerce_parameter(value) for value in values]


def print_failure(message: str, error: DatabaseError) -> None:
    """Render a failed operation with the driver's native diagnostic."""
    console.print(f"[red]{message}: {error.message}[/red]")
    if error.code is not None:
        console.print(f"[dim]{error.kind.value} error, native code {error.code}[/dim]")
