"""Time primitives: exact durations, instants, the Clock protocol and test clocks."""

from .clock import Clock, MonotonicClock, sleep_for
from .duration import ATTOS_PER_SECOND, Duration, DurationLike, Instant
from .testing import ImmediateClock, ManualClock, UnimplementedClock

__all__ = [
    # Values
    "Duration",
    "DurationLike",
    "Instant",
    "ATTOS_PER_SECOND",
    # Clocks
    "Clock",
    "MonotonicClock",
    "sleep_for",
    # Test doubles
    "ImmediateClock",
    "ManualClock",
    "UnimplementedClock",
]
