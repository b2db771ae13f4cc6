"""Exceptions module for neo-backoff."""

from .base import NeoBackoffError, create_error_response
from .invalid_backoff_configuration import InvalidBackoffConfiguration
from .retry import ForcedRetry, MaxAttemptsExceededError, RetryCancelledError

__all__ = [
    "NeoBackoffError",
    "create_error_response",
    "InvalidBackoffConfiguration",
    "ForcedRetry",
    "MaxAttemptsExceededError",
    "RetryCancelledError",
]
