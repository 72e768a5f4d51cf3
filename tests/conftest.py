"""Shared test fixtures and factories."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from rich.logging import RichHandler

from cadence.config.paths import ENV_VAR, get_cadence_home
from cadence.logging import JSONLHandler
from cadence.manager import IntervalManager
from cadence.timers import VirtualTimers

# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def cadence_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point CADENCE_HOME at a temp dir and run from it, so no real config leaks in."""
    home = tmp_path / "cadence-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("CADENCE_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    get_cadence_home.cache_clear()
    yield home
    get_cadence_home.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Remove handlers installed by configure_logging() during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, RichHandler, JSONLHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


# =============================================================================
# Timer Fixtures
# =============================================================================


class RecordingTimers:
    """One-shot timer facility that only records calls.

    Timers fire when a test calls ``fire`` on them.
    """

    def __init__(self) -> None:
        self.armed: list[tuple[float, Callable[[], Any]]] = []
        self.cancelled: list[int] = []
        self.fired: set[int] = set()

    def arm(self, delay: float, on_fire: Callable[[], Any]) -> int:
        self.armed.append((delay, on_fire))
        return len(self.armed) - 1

    def cancel(self, timer: int) -> None:
        self.cancelled.append(timer)

    @property
    def delays(self) -> list[float]:
        return [delay for delay, _ in self.armed]

    @property
    def live(self) -> list[int]:
        """Timer ids that were armed and neither fired nor cancelled."""
        return [
            i
            for i in range(len(self.armed))
            if i not in self.cancelled and i not in self.fired
        ]

    def fire(self, timer: int) -> None:
        self.fired.add(timer)
        self.armed[timer][1]()

    def fire_latest(self) -> None:
        self.fire(len(self.armed) - 1)


@pytest.fixture
def virtual_timers() -> VirtualTimers:
    return VirtualTimers()


@pytest.fixture
def manager(virtual_timers: VirtualTimers) -> IntervalManager:
    """Interval manager running on a virtual clock."""
    return IntervalManager(virtual_timers)


@pytest.fixture
def recording_timers() -> RecordingTimers:
    return RecordingTimers()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
[scheduler]
max_handle = 1000
default_delays = [0.5, 0.25]

[logging]
level = "DEBUG"
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "custom.toml"
    config_path.write_text(config_toml_content)
    return config_path


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
