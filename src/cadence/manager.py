"""Interval manager: repeating schedules over one-shot timers.

Each schedule keeps exactly one one-shot timer armed. When that timer
fires, the manager arms the next one (with the next selected delay)
before invoking the callback, so a slow or failing callback never stalls
the schedule. Stopping a schedule cancels its armed timer and drops its
registry entry.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, NewType

from cadence.delays import Delay, delay_at, select_delay, validate_delays
from cadence.timers import AsyncioTimers, OneShotTimers

if TYPE_CHECKING:
    from cadence.config.models import CadenceConfig

logger = logging.getLogger(__name__)

ScheduleHandle = NewType("ScheduleHandle", int)

# Handles wrap around after this value, skipping any still in use.
DEFAULT_MAX_HANDLE = 2**31 - 1


@dataclass
class ActiveSchedule:
    """Registry record for one running schedule."""

    handle: ScheduleHandle
    callback: Callable[..., Any]
    delays: Sequence[Delay]  # shared with the caller, never mutated
    args: tuple[Any, ...]
    timer: Any = None  # currently armed one-shot timer
    invocation_count: int = 0


class IntervalManager:
    """Runs variable-delay repeating schedules.

    Example:
        manager = IntervalManager()
        handle = manager.start(poll, [16, 8, 4, 2], "inbox")
        ...
        manager.stop(handle)

    The delay before invocation ``n`` is ``delays[n]``; after the last
    element the final delay is reused forever.
    """

    def __init__(
        self,
        timers: OneShotTimers | None = None,
        *,
        max_handle: int = DEFAULT_MAX_HANDLE,
    ) -> None:
        if max_handle < 1:
            raise ValueError("max_handle must be at least 1")
        if timers is None:
            timers = AsyncioTimers()
        self._timers: OneShotTimers = timers
        self._max_handle = max_handle
        self._registry: dict[ScheduleHandle, ActiveSchedule] = {}
        self._last_handle = 0
        self._tasks: set[asyncio.Future[Any]] = set()

    @classmethod
    def from_config(
        cls, config: CadenceConfig, timers: OneShotTimers | None = None
    ) -> IntervalManager:
        return cls(timers, max_handle=config.scheduler.max_handle)

    @property
    def timers(self) -> OneShotTimers:
        return self._timers

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, handle: object) -> bool:
        return handle in self._registry

    @property
    def active_handles(self) -> list[ScheduleHandle]:
        return list(self._registry)

    def invocation_count(self, handle: ScheduleHandle) -> int | None:
        """Number of firings so far, or None if the handle is not active."""
        schedule = self._registry.get(handle)
        return schedule.invocation_count if schedule else None

    def start(
        self,
        callback: Callable[..., Any],
        delays: Sequence[Delay],
        *args: Any,
    ) -> ScheduleHandle:
        """Start a repeating schedule and return its handle.

        Args:
            callback: Called with ``*args`` on every firing. If it returns
                an awaitable, that is run as a task on the running loop.
            delays: Non-empty sequence of non-negative delays, in seconds.
                Held by reference and never modified.
            *args: Positional arguments passed to every invocation.

        Raises:
            InvalidArgument: If ``delays`` is invalid. Nothing is armed.
            RuntimeError: If every handle value is in use.
        """
        validate_delays(delays)
        handle = self._allocate_handle()
        schedule = ActiveSchedule(
            handle=handle, callback=callback, delays=delays, args=args
        )
        first_delay = select_delay(delays, 0)
        schedule.timer = self._timers.arm(first_delay, lambda: self._fire(handle))
        self._registry[handle] = schedule
        logger.info(
            "schedule_started",
            extra={
                "schedule.handle": handle,
                "schedule.first_delay": first_delay,
                "schedule.delay_count": len(delays),
            },
        )
        return handle

    def stop(self, handle: ScheduleHandle) -> None:
        """Cancel a schedule. Unknown or already-stopped handles are ignored."""
        try:
            schedule = self._registry.get(handle)
        except TypeError:
            # Unhashable, so never a handle.
            return
        if schedule is None:
            return
        self._timers.cancel(schedule.timer)
        del self._registry[handle]
        logger.info(
            "schedule_stopped",
            extra={
                "schedule.handle": handle,
                "schedule.invocations": schedule.invocation_count,
            },
        )

    def stop_all(self) -> int:
        """Cancel every active schedule. Returns the number stopped."""
        handles = list(self._registry)
        for handle in handles:
            self.stop(handle)
        return len(handles)

    def _fire(self, handle: ScheduleHandle) -> None:
        schedule = self._registry.get(handle)
        if schedule is None:
            # Stopped after this timer was already on its way.
            return

        schedule.invocation_count += 1
        try:
            delay = delay_at(schedule.delays, schedule.invocation_count)
            schedule.timer = self._timers.arm(delay, lambda: self._fire(handle))
        except Exception:
            # Nothing is armed any more, so the handle must not stay active.
            del self._registry[handle]
            logger.exception(
                "schedule_rearm_failed",
                extra={
                    "schedule.handle": handle,
                    "schedule.invocation": schedule.invocation_count,
                },
            )
            raise
        logger.debug(
            "schedule_rearmed",
            extra={
                "schedule.handle": handle,
                "schedule.invocation": schedule.invocation_count,
                "schedule.next_delay": delay,
            },
        )

        result = schedule.callback(*schedule.args)
        if inspect.isawaitable(result):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(result):
                    result.close()
                raise RuntimeError(
                    "Async callbacks need a running event loop"
                ) from None
            task = asyncio.ensure_future(result, loop=loop)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    def _allocate_handle(self) -> ScheduleHandle:
        if len(self._registry) >= self._max_handle:
            raise RuntimeError(
                f"No free schedule handles ({self._max_handle} schedules active)"
            )
        candidate = self._last_handle
        while True:
            candidate += 1
            if candidate > self._max_handle:
                candidate = 1
                logger.warning(
                    "schedule_handle_wrapped",
                    extra={"schedule.max_handle": self._max_handle},
                )
            if candidate not in self._registry:
                break
        self._last_handle = candidate
        return ScheduleHandle(candidate)


@lru_cache(maxsize=1)
def get_default_manager() -> IntervalManager:
    """Get the process-wide manager, creating it on first use."""
    return IntervalManager()


def reset_default_manager() -> None:
    """Stop every schedule on the default manager and discard it."""
    if get_default_manager.cache_info().currsize:
        get_default_manager().stop_all()
    get_default_manager.cache_clear()


def schedule(
    callback: Callable[..., Any], delays: Sequence[Delay], *args: Any
) -> ScheduleHandle:
    """Start a schedule on the default manager (requires a running loop)."""
    return get_default_manager().start(callback, delays, *args)


def cancel_schedule(handle: ScheduleHandle) -> None:
    """Stop a schedule on the default manager. Never raises."""
    get_default_manager().stop(handle)
