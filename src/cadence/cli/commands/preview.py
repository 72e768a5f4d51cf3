"""Preview the delays a schedule would use."""

from itertools import islice
from typing import Annotated

import typer

from cadence.cli.console import console, delays_or_exit, format_seconds, init_logging
from cadence.delays import iter_delays


def register(app: typer.Typer) -> None:
    """Register the preview command."""

    @app.command()
    def preview(
        ctx: typer.Context,
        delays: Annotated[
            str,
            typer.Argument(help='Delay sequence in seconds, e.g. "16,8,4,2"'),
        ],
        count: Annotated[
            int,
            typer.Option("--count", "-n", min=1, help="Number of invocations to show"),
        ] = 8,
    ) -> None:
        """Show the delay before each invocation, without running anything.

        Examples:
            cadence preview 16,8,4,2            # 16, 8, 4, 2, 2, 2, ...
            cadence preview "0.5 1 2" -n 5
        """
        from rich.table import Table

        init_logging(ctx)
        sequence = delays_or_exit(delays)

        table = Table(show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Delay", justify="right")
        table.add_column("Fires at", justify="right", style="cyan")

        elapsed = 0.0
        for index, delay in enumerate(islice(iter_delays(sequence), count)):
            elapsed += delay
            table.add_row(str(index), format_seconds(delay), format_seconds(elapsed))

        console.print(table)
