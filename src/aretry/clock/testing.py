"""Deterministic clocks for tests.

- ImmediateClock: every sleep completes at once and jumps ``now`` to the deadline
- ManualClock: sleeps complete only when the test advances time
- UnimplementedClock: fails loudly if the code under test touches the clock

Example:
    >>> clock = ImmediateClock()
    >>> await retry(flaky, clock=clock, strategy=lambda e: Retry(Backoff.constant(1)))
    >>> clock.sleeps
    [Duration(secs=1, attos=0), Duration(secs=1, attos=0)]
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field

from aretry.errors import UnimplementedClockError

from .duration import Duration, Instant


async def _mega_yield(count: int = 20) -> None:
    """Let other ready tasks run until they reach their next suspension."""
    for _ in range(count):
        await asyncio.sleep(0)


def _raise_if_cancelling() -> None:
    task = asyncio.current_task()
    if task is not None and task.cancelling():
        raise asyncio.CancelledError()


@dataclass(slots=True)
class ImmediateClock:
    """Clock whose sleeps return immediately after moving ``now`` forward.

    Records each requested sleep length in ``sleeps``.
    """

    current: Instant = field(default_factory=Instant)
    minimum_resolution: Duration = field(default_factory=Duration.zero)
    sleeps: list[Duration] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def now(self) -> Instant:
        with self._lock:
            return self.current

    async def sleep(self, until: Instant, tolerance: Duration | None = None) -> None:
        _raise_if_cancelling()
        with self._lock:
            self.sleeps.append(self.current.duration_to(until))
            self.current = max(self.current, until)
        await _mega_yield()


@dataclass(frozen=True, slots=True)
class _Sleeper:
    deadline: Instant
    future: asyncio.Future[None]


@dataclass(slots=True)
class ManualClock:
    """Clock that only moves when the test calls ``advance``.

    Any number of tasks may sleep concurrently; each is woken once ``now``
    reaches its own deadline. Cancelling a sleeping task removes its sleeper
    and raises ``CancelledError`` in it.

    Example:
        >>> clock = ManualClock()
        >>> task = asyncio.create_task(retry(op, clock=clock, strategy=...))
        >>> await clock.advance(Duration.seconds(1))
    """

    current: Instant = field(default_factory=Instant)
    minimum_resolution: Duration = field(default_factory=Duration.zero)
    _sleepers: list[_Sleeper] = field(default_factory=list, repr=False)

    def now(self) -> Instant:
        return self.current

    @property
    def pending(self) -> int:
        """Number of sleeps not yet woken."""
        return len(self._sleepers)

    async def sleep(self, until: Instant, tolerance: Duration | None = None) -> None:
        _raise_if_cancelling()
        if until <= self.current:
            await asyncio.sleep(0)
            return
        sleeper = _Sleeper(until, asyncio.get_running_loop().create_future())
        self._sleepers.append(sleeper)
        try:
            await sleeper.future
        finally:
            if sleeper in self._sleepers:
                self._sleepers.remove(sleeper)

    async def advance(self, by: Duration | None = None) -> None:
        """Move time forward by ``by`` (default zero) and run the sleepers it wakes."""
        await _mega_yield()
        self.current = self.current.advanced(by=by or Duration.zero())
        for sleeper in [s for s in self._sleepers if s.deadline <= self.current]:
            self._sleepers.remove(sleeper)
            if not sleeper.future.done():
                sleeper.future.set_result(None)
        await _mega_yield()

    async def run(self) -> None:
        """Advance straight to the last pending deadline, waking every sleeper."""
        await _mega_yield()
        while self._sleepers:
            latest = max(s.deadline for s in self._sleepers)
            await self.advance(self.current.duration_to(latest))


class UnimplementedClock:
    """Clock that raises UnimplementedClockError from every member.

    Pass it where a test asserts that no backoff sleep happens.
    """

    __slots__ = ()

    def now(self) -> Instant:
        raise UnimplementedClockError("now")

    @property
    def minimum_resolution(self) -> Duration:
        raise UnimplementedClockError("minimum_resolution")

    async def sleep(self, until: Instant, tolerance: Duration | None = None) -> None:
        raise UnimplementedClockError("sleep")
