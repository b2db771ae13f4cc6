"""Invalid backoff configuration exception.

Raised when a BackoffPolicy is constructed with values that cannot drive
the retry loop. Configuration errors surface at build time, never while
a task is being retried.
"""

from typing import Any, Dict, Optional

from .base import NeoBackoffError


class InvalidBackoffConfiguration(NeoBackoffError):
    """
    Exception raised when backoff configuration is invalid.

    Carries a mapping of field name to error description so every
    problem with a configuration can be reported at once.
    """

    def __init__(
        self,
        message: str,
        configuration_errors: Optional[Dict[str, str]] = None,
        **kwargs
    ):
        """
        Initialize invalid backoff configuration exception.

        Args:
            message: Human-readable error message
            configuration_errors: Dictionary of field-specific errors
            **kwargs: Additional context information
        """
        details = {
            "error_type": "invalid_backoff_configuration",
            "configuration_errors": configuration_errors or {},
            **kwargs
        }

        super().__init__(
            message=message,
            error_code="INVALID_BACKOFF_CONFIGURATION",
            details=details,
        )

        self.configuration_errors = configuration_errors or {}

    @classmethod
    def for_negative_duration(cls, field_name: str, value: int) -> "InvalidBackoffConfiguration":
        """
        Create exception for a negative wait duration.

        Args:
            field_name: Name of the duration field (cap_ms or base_ms)
            value: The rejected value

        Returns:
            InvalidBackoffConfiguration instance
        """
        return cls(
            message=f"'{field_name}' must be >= 0 milliseconds, got {value}",
            configuration_errors={field_name: "Must be non-negative"},
            invalid_value=value,
        )

    @classmethod
    def for_invalid_max_attempts(cls, value: int) -> "InvalidBackoffConfiguration":
        """
        Create exception for a bounded attempt budget below one.

        Args:
            value: The rejected max_attempts value

        Returns:
            InvalidBackoffConfiguration instance
        """
        return cls(
            message=f"'max_attempts' must be >= 1 when bounded, got {value}",
            configuration_errors={"max_attempts": "Must be a positive integer"},
            invalid_value=value,
        )

    @classmethod
    def for_invalid_type(
        cls,
        field_name: str,
        field_value: Any,
        expected_format: str,
    ) -> "InvalidBackoffConfiguration":
        """
        Create exception for a value of the wrong type.

        Args:
            field_name: Name of the invalid field
            field_value: The invalid value
            expected_format: Expected type description

        Returns:
            InvalidBackoffConfiguration instance
        """
        return cls(
            message=f"Invalid value for '{field_name}': expected {expected_format}",
            configuration_errors={
                field_name: f"Expected {expected_format}, got {type(field_value).__name__}"
            },
            invalid_value=repr(field_value),
        )
