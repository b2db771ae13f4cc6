"""Exceptions describing why a retried attempt or retry run ended."""

from typing import Any, Optional

from .base import NeoBackoffError


class ForcedRetry(NeoBackoffError):
    """Failure synthesized when the retry predicate rejects a task result.

    The executor never raises this. It is handed to the exception handler
    so observers see every failed attempt, including ones where the task
    itself returned normally.
    """

    def __init__(self, value: Any, attempt: int):
        super().__init__(
            message=f"Forced retry: result rejected on attempt {attempt}",
            error_code="FORCED_RETRY",
            details={"attempt": attempt, "value": repr(value)},
        )
        self.value = value
        self.attempt = attempt


class RetryCancelledError(NeoBackoffError):
    """Raised when a cancellation signal arrives while waiting between attempts."""

    def __init__(self, attempt: int, wait_ms: Optional[int] = None):
        details = {"attempt": attempt}
        if wait_ms is not None:
            details["wait_ms"] = wait_ms
        super().__init__(
            message=f"Retry cancelled after attempt {attempt}",
            error_code="RETRY_CANCELLED",
            details=details,
        )
        self.attempt = attempt
        self.wait_ms = wait_ms


class MaxAttemptsExceededError(NeoBackoffError):
    """Raised when a caller asks for the value of an exhausted retry run.

    The retry loop itself reports exhaustion as a result status. This
    exception exists for call sites that need a value or an error, such as
    ExecutionResult.unwrap() and the with_backoff decorator.
    """

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        details = {"attempts": attempts}
        if last_error is not None:
            details["last_error"] = str(last_error)
            details["last_error_type"] = type(last_error).__name__
        super().__init__(
            message=f"Exceeded max attempts after {attempts} attempt(s)",
            error_code="EXCEEDED_MAX_ATTEMPTS",
            details=details,
        )
        self.attempts = attempts
        self.last_error = last_error
