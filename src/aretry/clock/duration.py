"""Duration and Instant value types.

Durations are exact: whole seconds plus an attosecond (10^-18 s) remainder.
Python ints have no width limit, so products and jitter draws over very large
delays never lose precision.

Example:
    >>> Duration.seconds(3) * 2 ** 2
    Duration(secs=12, attos=0)
    >>> Duration.of(1.5) == Duration.milliseconds(1500)
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction
from typing import TypeAlias

ATTOS_PER_SECOND = 10**18
_ATTOS_PER_MILLI = 10**15
_ATTOS_PER_MICRO = 10**12
_ATTOS_PER_NANO = 10**9

Number: TypeAlias = int | float


def _to_attos(value: Number, scale: int) -> int:
    if isinstance(value, int):
        return value * scale
    return round(Fraction(value) * scale)  # Exact rational of the float, then nearest attosecond


@dataclass(frozen=True, slots=True, order=True)
class Duration:
    """Exact time span: ``secs`` whole seconds plus ``attos`` attoseconds.

    ``attos`` is normalized into ``[0, 10**18)`` so field-wise ordering is
    chronological ordering, also for negative spans.
    """

    secs: int = 0
    attos: int = 0

    def __post_init__(self) -> None:
        carry, attos = divmod(self.attos, ATTOS_PER_SECOND)
        if carry:
            object.__setattr__(self, "secs", self.secs + carry)
            object.__setattr__(self, "attos", attos)

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def zero(cls) -> Duration:
        return cls()

    @classmethod
    def from_attoseconds(cls, attoseconds: int) -> Duration:
        secs, attos = divmod(attoseconds, ATTOS_PER_SECOND)
        return cls(secs, attos)

    @classmethod
    def seconds(cls, value: Number) -> Duration:
        return cls.from_attoseconds(_to_attos(value, ATTOS_PER_SECOND))

    @classmethod
    def milliseconds(cls, value: Number) -> Duration:
        return cls.from_attoseconds(_to_attos(value, _ATTOS_PER_MILLI))

    @classmethod
    def microseconds(cls, value: Number) -> Duration:
        return cls.from_attoseconds(_to_attos(value, _ATTOS_PER_MICRO))

    @classmethod
    def nanoseconds(cls, value: Number) -> Duration:
        return cls.from_attoseconds(_to_attos(value, _ATTOS_PER_NANO))

    @classmethod
    def of(cls, value: DurationLike) -> Duration:
        """Coerce a Duration, a timedelta, or a number of seconds."""
        match value:
            case Duration():
                return value
            case timedelta():
                micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
                return cls.microseconds(micros)
            case bool():
                raise TypeError("bool is not a duration")
            case int() | float():
                return cls.seconds(value)
        raise TypeError(f"Cannot interpret {type(value).__name__} as a duration")

    # ─────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────

    @property
    def attoseconds(self) -> int:
        """Total length in attoseconds."""
        return self.secs * ATTOS_PER_SECOND + self.attos

    def total_seconds(self) -> float:
        return self.secs + self.attos / ATTOS_PER_SECOND

    # ─────────────────────────────────────────────────────────────────
    # Arithmetic
    # ─────────────────────────────────────────────────────────────────

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_attoseconds(self.attoseconds + other.attoseconds)

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_attoseconds(self.attoseconds - other.attoseconds)

    def __neg__(self) -> Duration:
        return Duration.from_attoseconds(-self.attoseconds)

    def __mul__(self, factor: Number) -> Duration:
        if isinstance(factor, bool) or not isinstance(factor, int | float):
            return NotImplemented
        if isinstance(factor, int):
            return Duration.from_attoseconds(self.attoseconds * factor)
        return Duration.from_attoseconds(round(Fraction(factor) * self.attoseconds))

    __rmul__ = __mul__

    def __bool__(self) -> bool:
        return bool(self.secs or self.attos)

    def __str__(self) -> str:
        sign, total = ("-", -self.attoseconds) if self.attoseconds < 0 else ("", self.attoseconds)
        secs, attos = divmod(total, ATTOS_PER_SECOND)
        frac = f"{attos:018d}".rstrip("0")
        return f"{sign}{secs}.{frac}s" if frac else f"{sign}{secs}s"


DurationLike: TypeAlias = Duration | timedelta | int | float


@dataclass(frozen=True, slots=True, order=True)
class Instant:
    """Point on a clock's time line, stored as an offset from the clock's origin."""

    offset: Duration = field(default_factory=Duration)

    def advanced(self, by: Duration) -> Instant:
        return Instant(self.offset + by)

    def duration_to(self, other: Instant) -> Duration:
        return other.offset - self.offset
