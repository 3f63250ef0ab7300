"""Retry loop, decisions and composable backoff policies.

Example:
    >>> from aretry.retry import Backoff, Retry, STOP, retry
    >>>
    >>> async def flaky() -> str: ...
    >>>
    >>> await retry(
    ...     flaky,
    ...     max_attempts=5,
    ...     strategy=lambda e: Retry(Backoff.exponential(1, 2).max(30).jitter())
    ...     if isinstance(e, ConnectionError) else STOP,
    ... )
"""

from .backoff import Backoff
from .execute import retry, retry_if, retrying
from .policy import STOP, Retry, RetryDecision, Stop, Strategy, retry_on, strategy_from_predicate
from .rng import RandomSource, Xoshiro256StarStar

__all__ = [
    # Backoff
    "Backoff",
    "RandomSource",
    "Xoshiro256StarStar",
    # Decisions
    "Retry",
    "Stop",
    "STOP",
    "RetryDecision",
    "Strategy",
    "strategy_from_predicate",
    "retry_on",
    # Execution
    "retry",
    "retry_if",
    "retrying",
]
