"""Clock capability used by the retry loop to wait between attempts.

A clock only needs three members, so any object providing them works; there
is no base class to inherit. The retry loop borrows the clock for one call
and never constructs one itself unless the caller leaves it out.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol, runtime_checkable

from .duration import Duration, Instant


@runtime_checkable
class Clock(Protocol):
    """Time source with a cancellable sleep.

    Implementations must be safe to share between concurrent retry calls.
    ``sleep`` must raise ``asyncio.CancelledError`` if the sleeping task is
    cancelled.
    """

    def now(self) -> Instant: ...

    @property
    def minimum_resolution(self) -> Duration: ...

    async def sleep(self, until: Instant, tolerance: Duration | None = None) -> None: ...


async def sleep_for(clock: Clock, duration: Duration, tolerance: Duration | None = None) -> None:
    """Sleep on ``clock`` for ``duration`` measured from its current instant."""
    await clock.sleep(clock.now().advanced(by=duration), tolerance)


class MonotonicClock:
    """Real-time clock backed by ``time.monotonic_ns`` and ``asyncio.sleep``.

    Instants are offsets from an arbitrary fixed origin, so they only compare
    against instants from the same process. ``tolerance`` is accepted and
    ignored: the event loop schedules timers without slack.
    """

    __slots__ = ()

    def now(self) -> Instant:
        return Instant(Duration.nanoseconds(time.monotonic_ns()))

    @property
    def minimum_resolution(self) -> Duration:
        return Duration.seconds(time.get_clock_info("monotonic").resolution)

    async def sleep(self, until: Instant, tolerance: Duration | None = None) -> None:
        remaining = self.now().duration_to(until)
        # Past deadlines still yield once so a pending cancellation is delivered
        await asyncio.sleep(max(remaining.total_seconds(), 0.0))

    def __repr__(self) -> str:
        return "MonotonicClock()"
