"""Constants for neo-backoff.

All durations are integer milliseconds.
"""

from typing import Final


class BackoffDefaults:
    """Default values used when a policy field is not supplied."""

    CAP_MS: Final[int] = 60000
    BASE_MS: Final[int] = 100
    MAX_ATTEMPTS: Final[int] = 10
    JITTER: Final[bool] = False


class DurationLimits:
    """Bounds of the millisecond duration domain."""

    # Signed 64-bit: the largest exponent whose power of two is representable
    MAX_EXPONENT: Final[int] = 62
    MAX_DURATION_MS: Final[int] = 2**63 - 1
