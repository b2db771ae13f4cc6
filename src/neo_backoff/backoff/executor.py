"""Retry executor with exponential backoff.

Runs a task until it returns a value the retry predicate accepts, or the
policy's attempt budget is used up. Between attempts the executor waits
for compute_wait (or its jittered variant) of the zero-based number of
failed attempts so far.

Task exceptions never escape: they are handed to the exception handler
and turned into another attempt or an EXCEEDED_MAX_ATTEMPTS result. Only
BaseException subclasses such as KeyboardInterrupt and
asyncio.CancelledError propagate, and they end the whole run.

There is no per-attempt timeout. A task that never returns blocks the
executor forever.
"""

import asyncio
import inspect
import logging
import random
import threading
import time
from typing import Awaitable, Callable, Optional, TypeVar, Union

from ..core.exceptions import ForcedRetry, RetryCancelledError
from ..core.value_objects import (
    AttemptOutcome,
    BackoffPolicy,
    ExecutionResult,
    Failed,
    RetryRequested,
    Success,
    classify_result,
)
from .wait_time import compute_wait, compute_wait_jittered

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryPredicate = Callable[[T], bool]
ExceptionHandler = Callable[[BaseException], None]

# Longest single sleep; time.sleep and Event.wait overflow long before 2**63 ms
_MAX_SLEEP_SECONDS = min(threading.TIMEOUT_MAX, 365 * 24 * 3600.0)


def _sleep_chunks(wait_ms: int):
    """Split a wait into sleeps no longer than _MAX_SLEEP_SECONDS.

    Always yields at least once, so a zero wait still gives a cancel
    event one check.
    """
    remaining = wait_ms / 1000.0
    while True:
        chunk = min(remaining, _MAX_SLEEP_SECONDS)
        yield chunk
        remaining -= chunk
        if remaining <= 0:
            return


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


class RetryExecutor:
    """Drives the attempt loop for a BackoffPolicy.

    An executor holds no per-run state, so one instance can serve any
    number of concurrent runs. The sleep functions are injectable so
    callers can substitute a clock.
    """

    def __init__(
        self,
        sleep: Optional[Callable[[float], None]] = None,
        async_sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._sleep = sleep or time.sleep
        self._async_sleep = async_sleep or asyncio.sleep
        self._rng = rng

    def compute_wait_ms(self, policy: BackoffPolicy, attempt: int) -> int:
        """Wait before the attempt following failed attempt number ``attempt``."""
        if policy.jitter:
            return compute_wait_jittered(policy.cap_ms, policy.base_ms, attempt, self._rng)
        return compute_wait(policy.cap_ms, policy.base_ms, attempt)

    def run(
        self,
        policy: BackoffPolicy,
        task: Callable[[], T],
        retry_if: Optional[RetryPredicate] = None,
        exception_handler: Optional[ExceptionHandler] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult[T]:
        """
        Execute ``task`` with exponential backoff.

        Args:
            policy: Timing and attempt budget
            task: Zero-argument callable
            retry_if: Returns True for results that should be retried anyway
            exception_handler: Called with every attempt failure
            cancel_event: When set, aborts the run at the next wait

        Returns:
            SUCCESSFUL result with the task value, or EXCEEDED_MAX_ATTEMPTS

        Raises:
            RetryCancelledError: if cancel_event is set while waiting
        """
        attempt = 0
        while True:
            outcome = self._invoke(task, retry_if)
            if isinstance(outcome, Success):
                return self._succeed(outcome.value, attempt)

            failure = self._failure_of(outcome, attempt)
            wait_ms = self.compute_wait_ms(policy, attempt)
            self._log_failure(failure, attempt, wait_ms)
            self._notify(exception_handler, failure, attempt)
            self._wait(wait_ms, attempt, cancel_event)

            attempt += 1
            if not policy.should_continue(attempt):
                return self._exhaust(attempt, failure)

    async def run_async(
        self,
        policy: BackoffPolicy,
        task: Callable[[], Union[Awaitable[T], T]],
        retry_if: Optional[RetryPredicate] = None,
        exception_handler: Optional[ExceptionHandler] = None,
    ) -> ExecutionResult[T]:
        """
        Execute a coroutine function with exponential backoff.

        The task, the retry predicate and the exception handler may each
        be plain callables or coroutine functions. Waits are awaited, so
        cancelling the surrounding task raises asyncio.CancelledError out
        of this coroutine and no further attempts are made.
        """
        attempt = 0
        while True:
            outcome = await self._invoke_async(task, retry_if)
            if isinstance(outcome, Success):
                return self._succeed(outcome.value, attempt)

            failure = self._failure_of(outcome, attempt)
            wait_ms = self.compute_wait_ms(policy, attempt)
            self._log_failure(failure, attempt, wait_ms)
            await self._notify_async(exception_handler, failure, attempt)
            for seconds in _sleep_chunks(wait_ms):
                await self._async_sleep(seconds)

            attempt += 1
            if not policy.should_continue(attempt):
                return self._exhaust(attempt, failure)

    @staticmethod
    def _invoke(task: Callable[[], T], retry_if: Optional[RetryPredicate]) -> AttemptOutcome:
        try:
            value = task()
            return classify_result(value, retry_if)
        except Exception as e:
            return Failed(e)

    @staticmethod
    async def _invoke_async(task, retry_if: Optional[RetryPredicate]) -> AttemptOutcome:
        try:
            value = await _resolve(task())
            if retry_if is not None and await _resolve(retry_if(value)):
                return RetryRequested(value)
            return Success(value)
        except Exception as e:
            return Failed(e)

    @staticmethod
    def _failure_of(outcome: AttemptOutcome, attempt: int) -> BaseException:
        if isinstance(outcome, RetryRequested):
            return ForcedRetry(outcome.value, attempt + 1)
        return outcome.error

    @staticmethod
    def _log_failure(failure: BaseException, attempt: int, wait_ms: int) -> None:
        logger.warning("Attempt %d failed (%s); waiting %d ms", attempt + 1, failure, wait_ms)

    @staticmethod
    def _notify(exception_handler: Optional[ExceptionHandler], failure: BaseException, attempt: int) -> None:
        if exception_handler is None:
            return
        try:
            exception_handler(failure)
        except Exception:
            # Hook errors must not change the retry decision
            logger.exception("Exception handler raised on attempt %d", attempt + 1)

    @staticmethod
    async def _notify_async(
        exception_handler: Optional[ExceptionHandler],
        failure: BaseException,
        attempt: int,
    ) -> None:
        if exception_handler is None:
            return
        try:
            await _resolve(exception_handler(failure))
        except Exception:
            logger.exception("Exception handler raised on attempt %d", attempt + 1)

    def _wait(self, wait_ms: int, attempt: int, cancel_event: Optional[threading.Event]) -> None:
        logger.debug("Waiting %d ms before attempt %d", wait_ms, attempt + 2)
        for seconds in _sleep_chunks(wait_ms):
            if cancel_event is None:
                self._sleep(seconds)
            elif cancel_event.wait(seconds):
                logger.info("Retry cancelled while waiting after attempt %d", attempt + 1)
                raise RetryCancelledError(attempt + 1, wait_ms)

    @staticmethod
    def _succeed(value: T, attempt: int) -> ExecutionResult[T]:
        if attempt:
            logger.info("Task succeeded after %d attempt(s)", attempt + 1)
        return ExecutionResult.successful(value, attempts=attempt + 1)

    @staticmethod
    def _exhaust(attempts: int, failure: BaseException) -> ExecutionResult:
        logger.warning("Giving up after %d attempt(s): %s", attempts, failure)
        return ExecutionResult.exceeded(attempts=attempts, last_error=failure)


_default_executor = RetryExecutor()


def execute_with_backoff(
    task: Callable[[], T],
    policy: Optional[BackoffPolicy] = None,
    retry_if: Optional[RetryPredicate] = None,
    exception_handler: Optional[ExceptionHandler] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ExecutionResult[T]:
    """Run ``task`` with the given policy, or the default policy."""
    return _default_executor.run(
        policy or BackoffPolicy(),
        task,
        retry_if=retry_if,
        exception_handler=exception_handler,
        cancel_event=cancel_event,
    )


async def execute_with_backoff_async(
    task: Callable[[], Union[Awaitable[T], T]],
    policy: Optional[BackoffPolicy] = None,
    retry_if: Optional[RetryPredicate] = None,
    exception_handler: Optional[ExceptionHandler] = None,
) -> ExecutionResult[T]:
    """Async counterpart of execute_with_backoff."""
    return await _default_executor.run_async(
        policy or BackoffPolicy(),
        task,
        retry_if=retry_if,
        exception_handler=exception_handler,
    )
