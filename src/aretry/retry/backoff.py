"""Composable backoff policies.

A Backoff maps a 0-indexed retry attempt to the Duration to wait before the
next attempt (first retry = attempt 0). Policies are built from factories and
narrowed with modifiers; every modifier returns a new policy that wraps the
previous one, so modifiers apply in exactly the order they are written:

    >>> base = Backoff.exponential(3, 2)                # 3s, 6s, 12s, 24s
    >>> [str(base.max(10).duration(x)) for x in range(4)]
    ['3s', '6s', '10s', '10s']
    >>> [str(base.min(7).duration(x)) for x in range(4)]
    ['7s', '7s', '12s', '24s']

``base.max(M).min(m)`` and ``base.min(m).max(M)`` differ when ``m > M``.

Durations may be passed as Duration, timedelta, or int/float seconds.
Policies must yield non-negative durations; this is not checked.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Callable

from aretry.clock import Duration, DurationLike

from .rng import RandomSource, Xoshiro256StarStar, as_randbelow


def _zero(attempt: int) -> Duration:
    return Duration.zero()


@dataclass(frozen=True, slots=True)
class Backoff:
    """Pure attempt -> Duration function with a readable label.

    Attributes:
        fn: Attempt index to delay
        label: Description used in repr and log lines
    """

    fn: Callable[[int], Duration] = field(default=_zero, repr=False, compare=False)
    label: str = "none"

    # ─────────────────────────────────────────────────────────────────
    # Factories
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def none(cls) -> Backoff:
        """Retry immediately. ``f(x) = 0``"""
        return cls(_zero, "none")

    @classmethod
    def constant(cls, c: DurationLike) -> Backoff:
        """Fixed delay. ``f(x) = c``"""
        d = Duration.of(c)
        return cls(lambda attempt: d, f"constant({d})")

    @classmethod
    def linear(cls, a: DurationLike, b: DurationLike) -> Backoff:
        """Linear growth. ``f(x) = a*x + b`` with ``a`` the step and ``b`` the base delay."""
        step, base = Duration.of(a), Duration.of(b)
        return cls(lambda attempt: step * attempt + base, f"linear({step}, {base})")

    @classmethod
    def exponential(cls, a: DurationLike, b: int | float) -> Backoff:
        """Exponential growth. ``f(x) = a * b**x`` with ``a`` the base delay and ``b`` the factor.

        Fractional factors are computed as exact rationals, so large attempts
        never overflow a float.
        """
        base, factor = Duration.of(a), Fraction(b)

        def duration(attempt: int) -> Duration:
            return Duration.from_attoseconds(round(base.attoseconds * factor**attempt))

        return cls(duration, f"exponential({base}, {b})")

    @classmethod
    def custom(cls, fn: Callable[[int], DurationLike], label: str = "custom") -> Backoff:
        """Wrap any attempt -> delay callable, coercing its result to Duration."""
        return cls(lambda attempt: Duration.of(fn(attempt)), label)

    # ─────────────────────────────────────────────────────────────────
    # Modifiers
    # ─────────────────────────────────────────────────────────────────

    def max(self, upper: DurationLike) -> Backoff:
        """Cap every delay. ``g(x) = min(f(x), M)``"""
        cap, inner = Duration.of(upper), self.fn
        return Backoff(lambda attempt: min(inner(attempt), cap), f"{self.label}.max({cap})")

    def min(self, lower: DurationLike) -> Backoff:
        """Floor every delay. ``g(x) = max(f(x), m)``"""
        floor, inner = Duration.of(lower), self.fn
        return Backoff(lambda attempt: max(inner(attempt), floor), f"{self.label}.min({floor})")

    def jitter(self, rng: RandomSource | random.Random | None = None) -> Backoff:
        """Full jitter: a uniform draw from ``[0, f(x))`` at attosecond resolution.

        Without ``rng`` a Xoshiro256StarStar is seeded from OS entropy once, here.
        The generator lives in the returned policy, so reusing the policy keeps
        consuming one sequence. A zero delay stays exactly zero.
        """
        draw, inner = as_randbelow(rng if rng is not None else Xoshiro256StarStar()), self.fn

        def duration(attempt: int) -> Duration:
            total = inner(attempt).attoseconds
            if total <= 0:
                return Duration.zero()
            return Duration.from_attoseconds(draw(total))

        return Backoff(duration, f"{self.label}.jitter()")

    # ─────────────────────────────────────────────────────────────────
    # Evaluation
    # ─────────────────────────────────────────────────────────────────

    def duration(self, attempt: int) -> Duration:
        """Delay before the retry that follows failed attempt ``attempt`` (0-indexed)."""
        return self.fn(attempt)

    def delay(self, attempt: int) -> float:
        """Same as duration() in float seconds."""
        return self.fn(attempt).total_seconds()

    def __repr__(self) -> str:
        return f"Backoff({self.label})"
