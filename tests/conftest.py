"""Pytest configuration and fixtures for neo-backoff tests."""

import random
import pytest

from neo_backoff.backoff.executor import RetryExecutor
from neo_backoff.core.value_objects import BackoffPolicy


class RecordingSleep:
    """Sleep replacement that records requested durations instead of waiting."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def waits_ms(self):
        return [round(seconds * 1000) for seconds in self.calls]


class RecordingAsyncSleep(RecordingSleep):
    """Awaitable variant of RecordingSleep."""

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FlakyTask:
    """Task that raises a fixed number of times, then returns a value."""

    def __init__(self, failures: int, value="Fake result"):
        self.failures = failures
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"Fake exception {self.calls}")
        return self.value


@pytest.fixture
def recording_sleep():
    """Sleep function that never blocks."""
    return RecordingSleep()


@pytest.fixture
def recording_async_sleep():
    """Async sleep function that never blocks."""
    return RecordingAsyncSleep()


@pytest.fixture
def executor(recording_sleep, recording_async_sleep):
    """Executor wired to recording sleeps and a seeded generator."""
    return RetryExecutor(
        sleep=recording_sleep,
        async_sleep=recording_async_sleep,
        rng=random.Random(1234),
    )


@pytest.fixture
def fast_policy():
    """Bounded policy with millisecond-scale waits."""
    return BackoffPolicy(cap_ms=5000, base_ms=1, max_attempts=5)


@pytest.fixture
def failure_log():
    """List collecting everything passed to an exception handler."""
    return []


@pytest.fixture
def flaky_task():
    """Factory for tasks that fail a given number of times."""
    return FlakyTask
