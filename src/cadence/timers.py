"""One-shot timer facilities.

The interval manager never waits on its own. It asks a ``OneShotTimers``
facility to run a callback once after a delay, and to cancel that request
before it fires. Two facilities are provided:

- AsyncioTimers: real time, backed by ``loop.call_later``
- VirtualTimers: a virtual clock advanced explicitly by the caller
"""

from __future__ import annotations

import asyncio
import heapq
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


OnFire = Callable[[], Any]


class OneShotTimers(Protocol):
    """Host capability that runs a callback once after a delay."""

    def arm(self, delay: float, on_fire: OnFire) -> Any: ...

    def cancel(self, timer: Any) -> None: ...


class AsyncioTimers:
    """One-shot timers on an asyncio event loop.

    When no loop is given, the running loop is looked up on each ``arm``
    call, so arming requires a running loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def arm(self, delay: float, on_fire: OnFire) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, on_fire)

    def cancel(self, timer: asyncio.TimerHandle) -> None:
        timer.cancel()


@dataclass(order=True)
class _VirtualTimer:
    due: float
    seq: int
    armed_at: float = field(compare=False)
    on_fire: OnFire = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class VirtualTimers:
    """Deterministic one-shot timers on a virtual clock.

    Nothing fires until ``advance`` moves the clock forward. Timers due at
    the same instant fire in the order they were armed. Timers armed from
    inside a firing callback fire during the same ``advance`` call if they
    fall due before its target time, except zero-delay timers, which wait
    for the next ``advance`` or ``step`` call.

    Example:
        timers = VirtualTimers()
        manager = IntervalManager(timers)
        manager.start(print, [1, 2], "tick")
        timers.advance(3)  # prints "tick" at t=1 and t=3
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._heap: list[_VirtualTimer] = []
        self._next_seq = 0

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of armed timers that have not fired or been cancelled."""
        return sum(1 for t in self._heap if not t.cancelled)

    def arm(self, delay: float, on_fire: OnFire) -> _VirtualTimer:
        timer = _VirtualTimer(self._now + delay, self._next_seq, self._now, on_fire)
        self._next_seq += 1
        heapq.heappush(self._heap, timer)
        return timer

    def cancel(self, timer: _VirtualTimer) -> None:
        timer.cancelled = True

    def next_due(self) -> float | None:
        """Virtual time of the next live timer, or None when idle."""
        self._drop_cancelled()
        return self._heap[0].due if self._heap else None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that falls due.

        Returns:
            Number of timers fired.
        """
        if seconds < 0:
            raise ValueError("cannot advance the clock backwards")
        return self._run_until(self._now + seconds)

    def step(self) -> bool:
        """Advance straight to the next live timer and fire it.

        Returns:
            False if no timer was pending.
        """
        due = self.next_due()
        if due is None:
            return False
        self._run_until(due)
        return True

    def _run_until(self, target: float) -> int:
        # Zero-delay timers armed while firing wait for the next call.
        first_seq = self._next_seq
        deferred: list[_VirtualTimer] = []
        fired = 0
        try:
            while True:
                self._drop_cancelled()
                if not self._heap or self._heap[0].due > target:
                    break
                timer = heapq.heappop(self._heap)
                if timer.seq >= first_seq and timer.due == timer.armed_at:
                    deferred.append(timer)
                    continue
                self._now = timer.due
                fired += 1
                timer.on_fire()
        finally:
            for timer in deferred:
                heapq.heappush(self._heap, timer)
        self._now = target
        return fired

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
