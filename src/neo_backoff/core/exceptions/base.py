"""Base exceptions for neo-backoff.

All exceptions inherit from NeoBackoffError and carry an error code and a
details dictionary so callers can log or serialize them uniformly.
"""

from typing import Any, Dict, Optional


class NeoBackoffError(Exception):
    """Base exception for all neo-backoff errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: NeoBackoffError) -> Dict[str, Any]:
    """Create standardized error payload from exception.

    Args:
        exception: The neo-backoff exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
