"""Exponential wait time calculation.

Waits are integer milliseconds in the signed 64-bit domain. The attempt
number is unbounded when retrying forever, so every exponent, including
negative and enormous ones, must map to a wait within [0, cap].
"""

import random
import threading
from typing import Optional

from ..config.constants import DurationLimits

_local = threading.local()


def _thread_rng() -> random.Random:
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = random.Random()
        _local.rng = rng
    return rng


def compute_wait(cap: int, base: int, attempt: int) -> int:
    """
    Calculate the capped exponential wait for an attempt.

    Args:
        cap: Maximum wait in milliseconds
        base: Wait unit in milliseconds
        attempt: Zero-based attempt number

    Returns:
        min(cap, 2**attempt * base), or cap when that product is not a
        positive 64-bit duration
    """
    # 2**attempt is fractional below zero and unrepresentable past 62
    if attempt < 0 or attempt > DurationLimits.MAX_EXPONENT:
        return cap

    raw = (1 << attempt) * base
    if raw <= 0 or raw > DurationLimits.MAX_DURATION_MS:
        return cap
    return min(cap, raw)


def compute_wait_jittered(
    cap: int,
    base: int,
    attempt: int,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Calculate a full-jitter wait: uniform over [0, compute_wait(...)).

    Args:
        cap: Maximum wait in milliseconds
        base: Wait unit in milliseconds
        attempt: Zero-based attempt number
        rng: Random source, defaults to a per-thread generator

    Returns:
        Wait in milliseconds, 0 when the unjittered wait is 0
    """
    ceiling = compute_wait(cap, base, attempt)
    if ceiling <= 0:
        return 0
    return (rng or _thread_rng()).randrange(ceiling)
