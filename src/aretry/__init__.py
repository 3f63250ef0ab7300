"""aretry - composable retries for asyncio operations.

Re-runs a failing coroutine a bounded number of times. After each failure a
strategy picks either a backoff policy to wait on or stop; policies are built
from constant, linear and exponential factories narrowed with max, min and
jitter. Waiting goes through an injectable Clock so tests never sleep.

Quick Start:
    >>> from aretry import Backoff, retry_if, retry_on
    >>>
    >>> body = await retry_if(
    ...     lambda: client.get(url),
    ...     max_attempts=4,
    ...     backoff=Backoff.exponential(0.5, 2).max(8).jitter(),
    ...     when=retry_on(ConnectionError),
    ... )
"""

from aretry.clock import (
    Clock,
    Duration,
    ImmediateClock,
    Instant,
    ManualClock,
    MonotonicClock,
    UnimplementedClock,
)
from aretry.config import configure_logging, get_settings
from aretry.errors import InvalidAttemptsError, RetryError, UnimplementedClockError
from aretry.retry import (
    STOP,
    Backoff,
    RandomSource,
    Retry,
    RetryDecision,
    Stop,
    Xoshiro256StarStar,
    retry,
    retry_if,
    retry_on,
    retrying,
)

__version__ = "0.1.0"

__all__ = [
    # Retry
    "retry",
    "retry_if",
    "retrying",
    "retry_on",
    "Retry",
    "Stop",
    "STOP",
    "RetryDecision",
    # Backoff
    "Backoff",
    "RandomSource",
    "Xoshiro256StarStar",
    # Time
    "Clock",
    "Duration",
    "Instant",
    "MonotonicClock",
    "ImmediateClock",
    "ManualClock",
    "UnimplementedClock",
    # Errors
    "RetryError",
    "InvalidAttemptsError",
    "UnimplementedClockError",
    # Config
    "get_settings",
    "configure_logging",
]
