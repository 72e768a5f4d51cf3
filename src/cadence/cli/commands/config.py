"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from cadence.cli.console import console, error, init_logging, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        ctx: typer.Context,
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $CADENCE_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from rich.syntax import Syntax
        from rich.table import Table

        from cadence.config import ConfigError, load_config
        from cadence.config.paths import get_config_path

        init_logging(ctx)
        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            content = expanded_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            try:
                config_obj = load_config(expanded_path)
            except FileNotFoundError as e:
                error(str(e))
                raise typer.Exit(1) from None
            except ConfigError as e:
                error("Configuration validation failed:")
                console.print(str(e), markup=False)
                raise typer.Exit(1) from None

            table = Table(title="Configuration Summary")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")

            scheduler = config_obj.scheduler
            table.add_row("Max handle", str(scheduler.max_handle))
            table.add_row(
                "Default delays",
                ", ".join(f"{d:g}" for d in scheduler.default_delays)
                if scheduler.default_delays
                else "[dim]not configured[/dim]",
            )
            table.add_row("Log level", config_obj.logging.level)
            table.add_row(
                "Log files",
                f"kept {config_obj.logging.retention_days} days"
                if config_obj.logging.log_to_file
                else "[dim]disabled[/dim]",
            )

            success("Configuration is valid!")
            console.print()
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate")
            raise typer.Exit(1)
