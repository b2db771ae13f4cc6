"""Neo-Backoff - retry executor with exponential backoff and full jitter.

Runs a task until it succeeds, a retry predicate accepts its result, or
an attempt budget is exhausted, waiting an exponentially growing and
capped time between attempts.
"""

from .__version__ import __version__

import logging

# Library default: silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .backoff import (
    RetryExecutor,
    compute_wait,
    compute_wait_jittered,
    execute_with_backoff,
    execute_with_backoff_async,
    with_backoff,
)

from .core.exceptions import (
    NeoBackoffError,
    InvalidBackoffConfiguration,
    ForcedRetry,
    MaxAttemptsExceededError,
    RetryCancelledError,
    create_error_response,
)

from .core.value_objects import (
    DEFAULT_BACKOFF_POLICIES,
    BackoffPolicy,
    BackoffPolicyBuilder,
    ExecutionResult,
    ExecutionResultStatus,
    Failed,
    RetryRequested,
    Success,
)

from .config import get_logger, setup_logging

__all__ = [
    "__version__",
    # Execution
    "RetryExecutor",
    "execute_with_backoff",
    "execute_with_backoff_async",
    "with_backoff",
    "compute_wait",
    "compute_wait_jittered",
    # Exceptions
    "NeoBackoffError",
    "InvalidBackoffConfiguration",
    "ForcedRetry",
    "MaxAttemptsExceededError",
    "RetryCancelledError",
    "create_error_response",
    # Value objects
    "DEFAULT_BACKOFF_POLICIES",
    "BackoffPolicy",
    "BackoffPolicyBuilder",
    "ExecutionResult",
    "ExecutionResultStatus",
    "Failed",
    "RetryRequested",
    "Success",
    # Logging
    "get_logger",
    "setup_logging",
]
