"""Outcome of a single task invocation.

The retry loop classifies every attempt into exactly one of these before
deciding what to do next, so a rejected-but-returned value never has to
be smuggled through exception handling.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The task returned a value the retry predicate accepted."""
    value: T


@dataclass(frozen=True)
class RetryRequested(Generic[T]):
    """The task returned a value the retry predicate rejected."""
    value: T


@dataclass(frozen=True)
class Failed:
    """The task raised."""
    error: Exception


AttemptOutcome = Union[Success[T], RetryRequested[T], Failed]


def classify_result(value: T, retry_if: Optional[Callable[[T], bool]]) -> "AttemptOutcome[T]":
    """Classify a returned value against the retry predicate."""
    if retry_if is not None and retry_if(value):
        return RetryRequested(value)
    return Success(value)
