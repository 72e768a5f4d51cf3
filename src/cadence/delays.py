"""Delay selection for variable-delay schedules.

A schedule walks its delay sequence one position per invocation and pins
to the last element once the sequence is exhausted:

    [16, 8, 4, 2] -> 16, 8, 4, 2, 2, 2, ...

Selection is index-based and never mutates the sequence, so a single
sequence instance can be shared by any number of schedules.
"""

import math
import re
from collections.abc import Iterator, Sequence
from itertools import count
from numbers import Real

from cadence.errors import InvalidArgument

Delay = float | int

_SEPARATORS = re.compile(r"[\s,]+")


def validate_delays(delays: Sequence[Delay]) -> None:
    """Check that ``delays`` is a usable delay sequence.

    Raises:
        InvalidArgument: If the sequence is empty, is not an ordered
            sequence, or contains a negative or non-numeric value.
    """
    if isinstance(delays, str | bytes) or not isinstance(delays, Sequence):
        raise InvalidArgument(
            f"delays must be a sequence of numbers, got {type(delays).__name__}"
        )
    if len(delays) == 0:
        raise InvalidArgument("delays must not be empty")
    for index, delay in enumerate(delays):
        if isinstance(delay, bool) or not isinstance(delay, Real):
            raise InvalidArgument(
                f"delays[{index}] must be a number, got {type(delay).__name__}"
            )
        if math.isnan(delay) or delay < 0:
            raise InvalidArgument(f"delays[{index}] must be non-negative, got {delay}")


def select_delay(delays: Sequence[Delay], invocation_count: int) -> Delay:
    """Return the delay to wait before the next invocation.

    Index 0 is the delay before the first invocation. Once
    ``invocation_count`` reaches the last index, the last delay is
    returned for every further invocation.

    Args:
        delays: Non-empty sequence of non-negative delays, in seconds.
        invocation_count: Number of invocations so far.

    Raises:
        InvalidArgument: If ``delays`` is invalid, or ``invocation_count``
            is not an int or is negative.
    """
    validate_delays(delays)
    if isinstance(invocation_count, bool) or not isinstance(invocation_count, int):
        raise InvalidArgument(
            f"invocation_count must be an int, got {type(invocation_count).__name__}"
        )
    if invocation_count < 0:
        raise InvalidArgument(
            f"invocation_count must be non-negative, got {invocation_count}"
        )
    return delay_at(delays, invocation_count)


def delay_at(delays: Sequence[Delay], invocation_count: int) -> Delay:
    """Index into an already validated sequence, pinning to the last element."""
    return delays[min(invocation_count, len(delays) - 1)]


def iter_delays(delays: Sequence[Delay]) -> Iterator[Delay]:
    """Iterate over the successive delays of a schedule, forever.

    The sequence is validated immediately, not on first iteration.
    """
    validate_delays(delays)
    return (delay_at(delays, n) for n in count())


def parse_delays(text: str) -> list[float]:
    """Parse a delay list such as ``"16,8,4,2"`` or ``"0.5 1 2"``."""
    tokens = [t for t in _SEPARATORS.split(text.strip()) if t]
    delays: list[float] = []
    for token in tokens:
        try:
            delays.append(float(token))
        except ValueError:
            raise InvalidArgument(f"Invalid delay: {token!r}") from None
    validate_delays(delays)
    return delays
