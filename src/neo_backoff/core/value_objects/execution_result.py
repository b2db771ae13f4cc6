"""Execution result value object.

An ExecutionResult is built once, when the retry loop terminates, and
reports whether the task eventually produced an accepted value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from ..exceptions import MaxAttemptsExceededError

T = TypeVar("T")


class ExecutionResultStatus(Enum):
    """Terminal status of a retry run."""

    SUCCESSFUL = "successful"
    EXCEEDED_MAX_ATTEMPTS = "exceeded_max_attempts"

    def __str__(self) -> str:
        """String representation."""
        return self.value


@dataclass(frozen=True)
class ExecutionResult(Generic[T]):
    """Immutable terminal outcome of a retry run.

    Attributes:
        status: SUCCESSFUL or EXCEEDED_MAX_ATTEMPTS
        data: Task result, only meaningful when successful
        attempts: Number of times the task was invoked
        last_error: Failure of the final attempt when exhausted
    """

    status: ExecutionResultStatus
    data: Optional[T] = None
    attempts: int = 0
    last_error: Optional[BaseException] = None

    def __post_init__(self):
        """Post-initialization validation."""
        if not isinstance(self.status, ExecutionResultStatus):
            raise ValueError("Status must be an ExecutionResultStatus enum value")
        if self.status == ExecutionResultStatus.EXCEEDED_MAX_ATTEMPTS and self.data is not None:
            raise ValueError("Exhausted results carry no data")
        if self.attempts < 0:
            raise ValueError("Attempts must be non-negative")

    @classmethod
    def successful(cls, data: T, attempts: int = 1) -> "ExecutionResult[T]":
        """Create a successful execution result."""
        return cls(status=ExecutionResultStatus.SUCCESSFUL, data=data, attempts=attempts)

    @classmethod
    def exceeded(
        cls,
        attempts: int,
        last_error: Optional[BaseException] = None,
    ) -> "ExecutionResult[T]":
        """Create a result for a run that used its whole attempt budget."""
        return cls(
            status=ExecutionResultStatus.EXCEEDED_MAX_ATTEMPTS,
            attempts=attempts,
            last_error=last_error,
        )

    @property
    def is_success(self) -> bool:
        """Check if the task produced an accepted value."""
        return self.status == ExecutionResultStatus.SUCCESSFUL

    @property
    def has_data(self) -> bool:
        """Check if a value is present."""
        return self.is_success

    def unwrap(self) -> T:
        """
        Return the task value or raise if the run was exhausted.

        Raises:
            MaxAttemptsExceededError: if status is EXCEEDED_MAX_ATTEMPTS
        """
        if self.is_success:
            return self.data
        raise MaxAttemptsExceededError(self.attempts, self.last_error) from self.last_error
