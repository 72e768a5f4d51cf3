"""Shared console utilities for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape

from cadence.delays import parse_delays
from cadence.errors import ConfigError, InvalidArgument

if TYPE_CHECKING:
    from cadence.config.models import CadenceConfig

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{escape(msg)}[/red]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(msg)}[/green]")


def format_seconds(value: float) -> str:
    """Format a duration in seconds without trailing zeros."""
    return f"{value:g}s"


def delays_or_exit(text: str | None, default: list[float] | None = None) -> list[float]:
    """Parse a DELAYS argument, exiting with an error message on bad input."""
    if text is None:
        if default is None:
            error("No delays given and no [scheduler] default_delays configured")
            raise typer.Exit(1)
        return default
    try:
        return parse_delays(text)
    except InvalidArgument as e:
        error(str(e))
        raise typer.Exit(1) from None


def init_logging(ctx: typer.Context, config: CadenceConfig | None = None) -> None:
    """Configure logging from the --log-level option and the loaded config."""
    from cadence.logging import configure_logging

    override = (ctx.obj or {}).get("log_level")
    if config is None:
        configure_logging(level=override)
        return
    configure_logging(
        level=override or config.logging.level,
        log_to_file=config.logging.log_to_file,
        retention_days=config.logging.retention_days,
    )


def config_or_exit(path: Path | None) -> CadenceConfig:
    """Load the config (or defaults), exiting with an error message on failure."""
    from cadence.config import load_config_or_default

    try:
        return load_config_or_default(path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1) from None
