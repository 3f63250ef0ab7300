"""Error types raised by aretry itself.

Operation errors are never wrapped: whatever the retried operation raises is
re-raised unchanged. The types here only cover misuse of the library.
"""

from __future__ import annotations


class RetryError(Exception):
    """Base for errors raised by aretry (not by the operation being retried)."""


class InvalidAttemptsError(RetryError, ValueError):
    """Raised when a retry is configured with fewer than one attempt.

    This is a caller defect: no result can be produced, so the call fails
    before the operation is ever invoked.
    """

    def __init__(self, max_attempts: int) -> None:
        self.max_attempts = max_attempts
        super().__init__(f"Retry must have at least one attempt (got max_attempts={max_attempts})")


class UnimplementedClockError(RetryError, AssertionError):
    """Raised by UnimplementedClock when code under test touches the clock."""

    def __init__(self, member: str) -> None:
        self.member = member
        super().__init__(f"Unimplemented: Clock.{member} was called")
