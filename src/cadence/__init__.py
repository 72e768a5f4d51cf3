"""cadence - variable-delay repeating timers.

Public API:
- IntervalManager: Starts and stops repeating schedules
- schedule / cancel_schedule: Same, on a lazily created default manager
- select_delay: Picks the delay before a given invocation

Timer facilities:
- AsyncioTimers: One-shot timers on the running event loop
- VirtualTimers: One-shot timers on an explicitly advanced virtual clock
"""

from cadence.delays import iter_delays, parse_delays, select_delay, validate_delays
from cadence.errors import CadenceError, ConfigError, InvalidArgument
from cadence.manager import (
    ActiveSchedule,
    IntervalManager,
    ScheduleHandle,
    cancel_schedule,
    get_default_manager,
    reset_default_manager,
    schedule,
)
from cadence.timers import AsyncioTimers, OneShotTimers, VirtualTimers

__all__ = [
    "ActiveSchedule",
    "AsyncioTimers",
    "CadenceError",
    "ConfigError",
    "IntervalManager",
    "InvalidArgument",
    "OneShotTimers",
    "ScheduleHandle",
    "VirtualTimers",
    "cancel_schedule",
    "get_default_manager",
    "iter_delays",
    "parse_delays",
    "reset_default_manager",
    "schedule",
    "select_delay",
    "validate_delays",
]
