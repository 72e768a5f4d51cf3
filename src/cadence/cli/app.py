"""Main CLI application."""

from typing import Annotated

import typer

from cadence.cli.commands import config, preview, run, simulate

app = typer.Typer(
    name="cadence",
    help="cadence - variable-delay repeating timers",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="Log level (DEBUG, INFO, WARNING, ERROR). Overrides the config file.",
        ),
    ] = None,
) -> None:
    """Variable-delay repeating timers."""
    ctx.obj = {"log_level": log_level}


config.register(app)
preview.register(app)
simulate.register(app)
run.register(app)


if __name__ == "__main__":
    app()
