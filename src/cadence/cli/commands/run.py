"""Run a schedule in real time."""

from pathlib import Path
from typing import Annotated

import typer

from cadence.cli.console import (
    config_or_exit,
    console,
    delays_or_exit,
    init_logging,
)


def register(app: typer.Typer) -> None:
    """Register the run command."""

    @app.command()
    def run(
        ctx: typer.Context,
        delays: Annotated[
            str | None,
            typer.Argument(
                help="Delay sequence in seconds (default: [scheduler] default_delays)"
            ),
        ] = None,
        count: Annotated[
            int,
            typer.Option("--count", "-n", min=1, help="Stop after this many firings"),
        ] = 3,
        message: Annotated[
            str,
            typer.Option("--message", "-m", help="Text printed on each firing"),
        ] = "tick",
        config: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
    ) -> None:
        """Run a schedule on the asyncio event loop, printing on each firing.

        Examples:
            cadence run 1,2,4 -n 5 -m "polling"
        """
        import asyncio
        import time

        from cadence.manager import IntervalManager

        cfg = config_or_exit(config)
        init_logging(ctx, cfg)
        sequence = delays_or_exit(delays, cfg.scheduler.default_delays)

        async def run_schedule() -> int:
            manager = IntervalManager.from_config(cfg)
            done = asyncio.Event()
            started = time.monotonic()
            fired = 0

            def on_fire(text: str) -> None:
                nonlocal fired
                fired += 1
                elapsed = time.monotonic() - started
                console.print(
                    f"[dim]{fired:>4}[/dim]  [cyan]+{elapsed:.2f}s[/cyan]  {text}"
                )
                if fired >= count:
                    manager.stop(handle)
                    done.set()

            handle = manager.start(on_fire, sequence, message)
            try:
                await done.wait()
            finally:
                manager.stop_all()
            return fired

        try:
            fired = asyncio.run(run_schedule())
        except KeyboardInterrupt:
            console.print("\n[dim]Interrupted[/dim]")
            raise typer.Exit(130) from None

        console.print(f"[green]Done:[/green] {fired} firings")
