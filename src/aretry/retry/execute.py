"""The retry loop.

Runs an async operation up to ``max_attempts`` times. After each failure except
the last, the strategy decides between waiting (Retry) and re-raising (Stop).
The final attempt never consults the strategy: its outcome is returned or
raised as-is.

Cancellation is asyncio task cancellation. ``CancelledError`` is a
BaseException, so it is never caught here and never reaches the strategy.
If the operation swallows the cancellation and raises something else, the
pending request on the task is still honoured before any decision is made.

Example:
    >>> data = await retry(lambda: fetch(url))                    # 3 attempts, configured backoff
    >>> data = await retry_if(
    ...     lambda: fetch(url),
    ...     max_attempts=5,
    ...     backoff=Backoff.exponential(0.5, 2).max(10).jitter(),
    ...     when=retry_on(ConnectionError, TimeoutError),
    ... )
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

from aretry.clock import Clock, Duration, DurationLike, MonotonicClock
from aretry.config import get_settings
from aretry.errors import InvalidAttemptsError

from .backoff import Backoff
from .policy import Retry, Stop, Strategy, strategy_from_predicate

if TYPE_CHECKING:
    from collections.abc import Awaitable

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger("aretry.retry")


def _cancel_requested() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


def _default_backoff() -> Backoff:
    """Configured policy, built fresh so a jittered one owns its generator for one call."""
    return get_settings().retry.build_backoff()


def _describe(operation: Callable[..., object]) -> str:
    return getattr(operation, "__qualname__", None) or repr(operation)


async def retry(
    operation: Callable[[], Awaitable[R]],
    *,
    max_attempts: int | None = None,
    strategy: Strategy | None = None,
    clock: Clock | None = None,
    tolerance: DurationLike | None = None,
    name: str | None = None,
) -> R:
    """Run ``operation`` until it succeeds, the strategy stops, or attempts run out.

    Args:
        operation: Zero-argument callable returning an awaitable; called once per attempt
        max_attempts: Total attempts including the first (default: ARETRY_RETRY_MAX_ATTEMPTS, 3)
        strategy: ``(exc) -> Retry(backoff) | Stop()`` (default: retry every error with the
            configured backoff, ARETRY_RETRY_BACKOFF, which is none unless set)
        clock: Clock used for backoff sleeps (default: MonotonicClock)
        tolerance: Passed unchanged to ``clock.sleep`` (default: ARETRY_RETRY_TOLERANCE)
        name: Label for log lines (default: the operation's qualified name)

    Returns:
        The first successful result

    Raises:
        InvalidAttemptsError: ``max_attempts`` is below 1; nothing is run
        asyncio.CancelledError: The surrounding task was cancelled
        Exception: The operation's last error, unchanged, or an error from ``clock.sleep``
    """
    # Settings are only read for arguments the caller left out
    attempts = get_settings().retry.max_attempts if max_attempts is None else max_attempts
    if attempts < 1:
        raise InvalidAttemptsError(attempts)

    decide = strategy if strategy is not None else strategy_from_predicate(backoff=_default_backoff())
    clock = clock if clock is not None else MonotonicClock()
    slack = get_settings().retry.tolerance_duration if tolerance is None else Duration.of(tolerance)
    label = name or _describe(operation)

    for attempt in range(attempts - 1):
        if _cancel_requested():
            raise asyncio.CancelledError()
        try:
            return await operation()
        except Exception as exc:
            if _cancel_requested():
                raise asyncio.CancelledError() from exc
            match decide(exc):
                case Retry(backoff=backoff):
                    delay = backoff.duration(attempt)
                case Stop():
                    logger.debug(f"[{label}] Attempt {attempt + 1}/{attempts} failed ({type(exc).__name__}), stopping")
                    raise
                case other:
                    raise TypeError(f"Strategy returned {other!r}, expected Retry or Stop") from exc
            logger.info(
                f"[{label}] Retry {attempt + 1}/{attempts - 1} after {delay} "
                f"({type(exc).__name__}: {exc})"
            )
        await clock.sleep(clock.now().advanced(by=delay), slack)

    if _cancel_requested():
        raise asyncio.CancelledError()
    return await operation()


async def retry_if(
    operation: Callable[[], Awaitable[R]],
    *,
    max_attempts: int | None = None,
    backoff: Backoff | None = None,
    when: Callable[[Exception], bool] | None = None,
    clock: Clock | None = None,
    tolerance: DurationLike | None = None,
    name: str | None = None,
) -> R:
    """Retry with one fixed ``backoff`` for every error where ``when(exc)`` is true.

    Errors failing ``when`` are re-raised at once. Defaults: retry every error
    with the configured backoff (RetrySettings.build_backoff()). Other
    arguments as in retry().
    """
    return await retry(
        operation,
        max_attempts=max_attempts,
        strategy=strategy_from_predicate(when, backoff if backoff is not None else _default_backoff()),
        clock=clock,
        tolerance=tolerance,
        name=name,
    )


def retrying(
    *,
    max_attempts: int | None = None,
    strategy: Strategy | None = None,
    backoff: Backoff | None = None,
    when: Callable[[Exception], bool] | None = None,
    clock: Clock | None = None,
    tolerance: DurationLike | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator form: every call of the wrapped coroutine function goes through retry().

    Pass either ``strategy`` or ``backoff``/``when``, not both. Without
    ``strategy`` or ``backoff`` the configured backoff is built on each call.

    Example:
        >>> @retrying(max_attempts=4, backoff=Backoff.constant(0.2), when=retry_on(TimeoutError))
        ... async def ping(host: str) -> float: ...
    """
    if strategy is not None and (backoff is not None or when is not None):
        raise ValueError("Pass either strategy or backoff/when, not both")

    def decorate(fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if strategy is not None:
                decide = strategy
            else:
                decide = strategy_from_predicate(when, backoff if backoff is not None else _default_backoff())
            return await retry(
                lambda: fn(*args, **kwargs),
                max_attempts=max_attempts,
                strategy=decide,
                clock=clock,
                tolerance=tolerance,
                name=_describe(fn),
            )

        return wrapper

    return decorate
