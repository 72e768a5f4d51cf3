"""Run a schedule on a virtual clock."""

from pathlib import Path
from typing import Annotated

import typer

from cadence.cli.console import (
    config_or_exit,
    console,
    delays_or_exit,
    format_seconds,
    init_logging,
)


def register(app: typer.Typer) -> None:
    """Register the simulate command."""

    @app.command()
    def simulate(
        ctx: typer.Context,
        delays: Annotated[
            str | None,
            typer.Argument(
                help="Delay sequence in seconds (default: [scheduler] default_delays)"
            ),
        ] = None,
        count: Annotated[
            int,
            typer.Option("--count", "-n", min=1, help="Number of firings to simulate"),
        ] = 8,
        config: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
    ) -> None:
        """Drive a real schedule on a virtual clock and print each firing.

        Nothing sleeps: the clock jumps straight to the next due timer.
        """
        from cadence.manager import IntervalManager
        from cadence.timers import VirtualTimers

        cfg = config_or_exit(config)
        init_logging(ctx, cfg)
        sequence = delays_or_exit(delays, cfg.scheduler.default_delays)

        timers = VirtualTimers()
        manager = IntervalManager.from_config(cfg, timers)
        firings: list[float] = []

        def record() -> None:
            firings.append(timers.now)
            console.print(
                f"[dim]{len(firings):>4}[/dim]  fired at [cyan]t={format_seconds(timers.now)}[/cyan]"
            )
            if len(firings) >= count:
                manager.stop(handle)

        handle = manager.start(record, sequence)
        while handle in manager and timers.step():
            pass

        console.print(
            f"{len(firings)} firings over {format_seconds(timers.now)} of virtual time"
        )
