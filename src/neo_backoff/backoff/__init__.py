"""Exponential backoff calculation and retry execution."""

from .decorators import with_backoff
from .executor import (
    RetryExecutor,
    execute_with_backoff,
    execute_with_backoff_async,
)
from .wait_time import compute_wait, compute_wait_jittered

__all__ = [
    "with_backoff",
    "RetryExecutor",
    "execute_with_backoff",
    "execute_with_backoff_async",
    "compute_wait",
    "compute_wait_jittered",
]
