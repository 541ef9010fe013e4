"""Time sources for code generation and verification.

Anything time-dependent takes either an explicit ``now`` or a ``Clock`` so
tests can pin the timestamp instead of reading the wall clock.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float: ...


class SystemClock:
    """Reads the system wall clock (seconds since the Unix epoch)."""

    def now(self) -> float:
        return time.time()

    def __repr__(self) -> str:
        return "SystemClock()"


class FixedClock:
    """Always reports the same timestamp. Use ``advance`` to move it."""

    def __init__(self, timestamp: float) -> None:
        self.timestamp = timestamp

    def now(self) -> float:
        return self.timestamp

    def advance(self, seconds: float) -> None:
        self.timestamp += seconds

    def __repr__(self) -> str:
        return f"FixedClock({self.timestamp!r})"


SYSTEM_CLOCK = SystemClock()


def read_time(now: float | None = None, clock: Clock | None = None) -> float:
    """Return ``now`` if given, else the reading of ``clock`` (system clock by default)."""
    if now is not None:
        return now
    return (clock or SYSTEM_CLOCK).now()
