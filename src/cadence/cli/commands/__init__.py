"""CLI command modules."""

from cadence.cli.commands import config, preview, run, simulate

__all__ = ["config", "preview", "run", "simulate"]
