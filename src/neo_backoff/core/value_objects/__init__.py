"""Value objects for neo-backoff."""

from .attempt_outcome import AttemptOutcome, Failed, RetryRequested, Success, classify_result
from .backoff_policy import DEFAULT_BACKOFF_POLICIES, BackoffPolicy, BackoffPolicyBuilder
from .backoff_policy_schema import BackoffPolicySchema
from .execution_result import ExecutionResult, ExecutionResultStatus

__all__ = [
    "AttemptOutcome",
    "Failed",
    "RetryRequested",
    "Success",
    "classify_result",
    "DEFAULT_BACKOFF_POLICIES",
    "BackoffPolicy",
    "BackoffPolicyBuilder",
    "BackoffPolicySchema",
    "ExecutionResult",
    "ExecutionResultStatus",
]
