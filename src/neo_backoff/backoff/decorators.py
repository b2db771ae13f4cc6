"""Decorator form of the retry executor.

A decorated function has no ExecutionResult to hand back, so exhaustion
is reported by raising MaxAttemptsExceededError with the last failure as
its cause.
"""

import functools
import inspect
from typing import Any, Callable, Optional, TypeVar

from ..core.value_objects import BackoffPolicy
from .executor import ExceptionHandler, RetryExecutor, RetryPredicate

F = TypeVar("F", bound=Callable[..., Any])


def _is_async_callable(func: Callable[..., Any]) -> bool:
    """Detect coroutine functions, including partials and async __call__ objects."""
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)
    return inspect.iscoroutinefunction(call)


def with_backoff(
    policy: Optional[BackoffPolicy] = None,
    retry_if: Optional[RetryPredicate] = None,
    exception_handler: Optional[ExceptionHandler] = None,
    executor: Optional[RetryExecutor] = None,
) -> Callable[[F], F]:
    """
    Retry the decorated function with exponential backoff.

    Works on plain functions and coroutine functions, including
    functools.partial wrappers and objects with an ``async def __call__``.
    Each call starts a fresh attempt counter.

    Args:
        policy: Backoff policy, defaults to BackoffPolicy()
        retry_if: Returns True for results that should be retried anyway
        exception_handler: Called with every attempt failure
        executor: Executor to run with, defaults to a new RetryExecutor

    Raises:
        MaxAttemptsExceededError: from the wrapped call when attempts run out
    """
    effective_policy = policy or BackoffPolicy()
    effective_executor = executor or RetryExecutor()

    def decorator(func: F) -> F:
        if _is_async_callable(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                result = await effective_executor.run_async(
                    effective_policy,
                    lambda: func(*args, **kwargs),
                    retry_if=retry_if,
                    exception_handler=exception_handler,
                )
                return result.unwrap()

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            result = effective_executor.run(
                effective_policy,
                lambda: func(*args, **kwargs),
                retry_if=retry_if,
                exception_handler=exception_handler,
            )
            return result.unwrap()

        return sync_wrapper

    return decorator
