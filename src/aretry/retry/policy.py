"""Retry decisions returned by a strategy after each failed attempt.

A strategy is a plain function ``(exc) -> RetryDecision``. It may choose a
different Backoff per error, e.g. honouring a server's Retry-After hint:

    >>> def strategy(exc: Exception) -> RetryDecision:
    ...     match exc:
    ...         case TooManyRequests(retry_after=s):
    ...             return Retry(Backoff.constant(s))
    ...         case ConnectionError():
    ...             return Retry(Backoff.exponential(0.5, 2).max(10).jitter())
    ...     return STOP

Strategies run synchronously and must not raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, TypeAlias

from .backoff import Backoff


@dataclass(frozen=True, slots=True)
class Retry:
    """Wait ``backoff.duration(attempt)`` and try again."""

    backoff: Backoff = field(default_factory=Backoff.none)


@dataclass(frozen=True, slots=True)
class Stop:
    """Re-raise the error now without further attempts."""


RetryDecision: TypeAlias = Retry | Stop
Strategy: TypeAlias = Callable[[Exception], RetryDecision]

STOP = Stop()


def strategy_from_predicate(
    when: Callable[[Exception], bool] | None = None,
    backoff: Backoff | None = None,
) -> Strategy:
    """Build a strategy that retries with one fixed ``backoff`` whenever ``when(exc)`` holds.

    Args:
        when: Error predicate (default: retry every error)
        backoff: Policy used for every retry (default: Backoff.none())
    """
    decision = Retry(backoff or Backoff.none())
    if when is None:
        return lambda exc: decision
    return lambda exc: decision if when(exc) else STOP


def retry_on(*types: type[BaseException]) -> Callable[[Exception], bool]:
    """Predicate matching instances of any of ``types``."""
    return lambda exc: isinstance(exc, types)
