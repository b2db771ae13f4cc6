"""Tests for the synchronous retry executor."""

import logging
import threading
import pytest

from neo_backoff.backoff.executor import _MAX_SLEEP_SECONDS, RetryExecutor, execute_with_backoff
from neo_backoff.backoff.wait_time import compute_wait
from neo_backoff.core.exceptions import ForcedRetry, RetryCancelledError
from neo_backoff.core.value_objects import BackoffPolicy, ExecutionResultStatus


class TestRetryExecutorBounded:
    """Test cases for bounded attempt budgets."""

    def test_max_attempts_exceeded(self, flaky_task, executor, recording_sleep, failure_log):
        """Test an always-failing task runs exactly max_attempts times."""
        task = flaky_task(failures=100)
        policy = BackoffPolicy(base_ms=1, max_attempts=3)

        result = executor.run(policy, task, exception_handler=failure_log.append)

        assert result.status == ExecutionResultStatus.EXCEEDED_MAX_ATTEMPTS
        assert result.data is None
        assert task.calls == 3
        assert len(failure_log) == 3
        assert result.attempts == 3
        assert result.last_error is failure_log[-1]

    def test_successful_after_three_attempts(self, flaky_task, executor, fast_policy, failure_log):
        """Test a task failing twice succeeds on the third call."""
        task = flaky_task(failures=2)

        result = executor.run(fast_policy, task, exception_handler=failure_log.append)

        assert task.calls == 3
        assert len(failure_log) == 2
        assert all(isinstance(error, RuntimeError) for error in failure_log)
        assert result.status == ExecutionResultStatus.SUCCESSFUL
        assert result.data == "Fake result"
        assert result.attempts == 3

    def test_successful_first_attempt_does_not_wait(self, executor, recording_sleep, mocker):
        """Test an always-succeeding task is invoked once with no wait."""
        task = mocker.Mock(return_value="Do something")
        handler = mocker.Mock()
        policy = BackoffPolicy(cap_ms=5000, base_ms=100, max_attempts=5, jitter=True)

        result = executor.run(policy, task, exception_handler=handler)

        assert result.status == ExecutionResultStatus.SUCCESSFUL
        assert result.data == "Do something"
        task.assert_called_once_with()
        handler.assert_not_called()
        assert recording_sleep.calls == []

    def test_single_attempt_budget(self, flaky_task, executor):
        """Test max_attempts=1 still makes the first call."""
        task = flaky_task(failures=5)

        result = executor.run(BackoffPolicy(base_ms=1, max_attempts=1), task)

        assert task.calls == 1
        assert not result.is_success


class TestRetryExecutorUnbounded:
    """Test cases for unbounded retries."""

    @pytest.mark.parametrize("failures", [0, 1, 10, 25])
    def test_retries_until_success(self, flaky_task, executor, failures, failure_log):
        """Test a task failing K times is invoked K+1 times."""
        task = flaky_task(failures=failures)
        policy = BackoffPolicy.unbounded(cap_ms=10, base_ms=1)

        result = executor.run(policy, task, exception_handler=failure_log.append)

        assert task.calls == failures + 1
        assert len(failure_log) == failures
        assert result.is_success
        assert result.data == "Fake result"

    def test_ignores_default_budget(self, flaky_task, executor):
        """Test unbounded mode goes past the default attempt budget."""
        task = flaky_task(failures=BackoffPolicy().max_attempts)
        policy = BackoffPolicy.builder().with_base(1).with_cap(10).with_infinite_attempts().build()

        result = executor.run(policy, task)

        assert task.calls == BackoffPolicy().max_attempts + 1
        assert result.is_success


class TestRetryExecutorWaits:
    """Test cases for the waits between attempts."""

    def test_waits_follow_exponential_schedule(self, flaky_task, executor, recording_sleep):
        """Test the wait after failure k is compute_wait(cap, base, k)."""
        policy = BackoffPolicy(cap_ms=50, base_ms=5, max_attempts=6)

        executor.run(policy, flaky_task(failures=100))

        expected = [compute_wait(50, 5, attempt) for attempt in range(6)]
        assert recording_sleep.waits_ms == expected
        assert expected == [5, 10, 20, 40, 50, 50]

    def test_jittered_waits_below_ceiling(self, flaky_task, executor, recording_sleep):
        """Test jittered waits stay within [0, compute_wait)."""
        policy = BackoffPolicy(cap_ms=1000, base_ms=10, max_attempts=8, jitter=True)

        executor.run(policy, flaky_task(failures=100))

        assert len(recording_sleep.calls) == 8
        for attempt, wait_ms in enumerate(recording_sleep.waits_ms):
            assert 0 <= wait_ms < compute_wait(1000, 10, attempt)

    def test_compute_wait_ms_respects_policy(self, executor):
        policy = BackoffPolicy(cap_ms=1000, base_ms=10)
        assert executor.compute_wait_ms(policy, 3) == 80


class TestRetryPredicate:
    """Test cases for forced retries on rejected results."""

    def test_rejected_results_are_retried(self, executor, fast_policy, mocker, failure_log):
        """Test the predicate forces retries and the handler sees them."""
        task = mocker.Mock(side_effect=[None, None, "ready"])

        result = executor.run(
            fast_policy,
            task,
            retry_if=lambda value: value is None,
            exception_handler=failure_log.append,
        )

        assert result.data == "ready"
        assert task.call_count == 3
        assert len(failure_log) == 2
        assert all(isinstance(failure, ForcedRetry) for failure in failure_log)
        assert [failure.attempt for failure in failure_log] == [1, 2]
        assert failure_log[0].value is None

    def test_always_rejected_exhausts(self, executor):
        """Test a result that is never accepted exhausts the budget."""
        result = executor.run(
            BackoffPolicy(base_ms=1, max_attempts=2),
            lambda: "try again",
            retry_if=lambda value: value == "try again",
        )

        assert result.status == ExecutionResultStatus.EXCEEDED_MAX_ATTEMPTS
        assert result.data is None
        assert isinstance(result.last_error, ForcedRetry)
        assert result.last_error.value == "try again"

    def test_predicate_error_counts_as_failure(self, executor, fast_policy, failure_log):
        """Test an exception from the predicate is treated as a failed attempt."""
        calls = []

        def picky(value):
            calls.append(value)
            if len(calls) == 1:
                raise ValueError("cannot judge")
            return False

        result = executor.run(fast_policy, lambda: 42, retry_if=picky, exception_handler=failure_log.append)

        assert result.data == 42
        assert len(failure_log) == 1
        assert isinstance(failure_log[0], ValueError)


class TestExceptionHandling:
    """Test cases for error containment and propagation."""

    def test_task_errors_never_escape(self, executor):
        """Test task exceptions are converted into a result."""
        def task():
            raise ConnectionError("down")

        result = executor.run(BackoffPolicy(base_ms=1, max_attempts=2), task)

        assert not result.is_success
        assert isinstance(result.last_error, ConnectionError)

    def test_handler_errors_do_not_change_control_flow(self, flaky_task, executor, fast_policy, caplog):
        """Test a raising exception handler is logged and ignored."""
        def broken_handler(error):
            raise RuntimeError("handler bug")

        task = flaky_task(failures=2)
        with caplog.at_level(logging.ERROR, logger="neo_backoff"):
            result = executor.run(fast_policy, task, exception_handler=broken_handler)

        assert result.is_success
        assert task.calls == 3
        assert "Exception handler raised" in caplog.text

    def test_base_exceptions_propagate(self, executor, fast_policy):
        """Test interrupts raised by the task end the run."""
        task_calls = []

        def task():
            task_calls.append(1)
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            executor.run(fast_policy, task)

        assert len(task_calls) == 1

    def test_handler_receives_original_exception(self, executor, fast_policy, mocker):
        """Test the handler gets the exact exception instance."""
        error = TimeoutError("slow")
        handler = mocker.Mock()

        executor.run(fast_policy, mocker.Mock(side_effect=[error, "ok"]), exception_handler=handler)

        handler.assert_called_once_with(error)


class TestLongWaits:
    """Test cases for waits longer than a single sleep call can take."""

    HUGE = BackoffPolicy(cap_ms=2**63 - 1, base_ms=10**13, max_attempts=2)

    def test_huge_waits_are_split(self, flaky_task, executor, recording_sleep):
        """Test waits of billions of seconds are slept in bounded chunks."""
        result = executor.run(self.HUGE, flaky_task(failures=100))

        assert result.status == ExecutionResultStatus.EXCEEDED_MAX_ATTEMPTS
        assert len(recording_sleep.calls) > 2
        assert max(recording_sleep.calls) <= _MAX_SLEEP_SECONDS
        assert sum(recording_sleep.calls) == pytest.approx(1e10 + 2e10)

    def test_huge_wait_with_cancel_event(self, flaky_task):
        """Test a huge wait on a cancel event raises RetryCancelledError, not OverflowError."""
        cancel_event = threading.Event()
        cancel_event.set()
        task = flaky_task(failures=100)

        with pytest.raises(RetryCancelledError) as exc_info:
            RetryExecutor().run(self.HUGE, task, cancel_event=cancel_event)

        assert task.calls == 1
        assert exc_info.value.wait_ms == 10**13

    def test_zero_wait_still_sleeps_once(self, flaky_task, executor, recording_sleep):
        """Test a zero wait is still handed to sleep once per failure."""
        executor.run(BackoffPolicy(cap_ms=0, max_attempts=3), flaky_task(failures=100))

        assert recording_sleep.calls == [0.0, 0.0, 0.0]


class TestCancellation:
    """Test cases for cancelling a run while it waits."""

    def test_cancel_before_wait_aborts(self, flaky_task, fast_policy):
        """Test a set event aborts the run at the first wait."""
        cancel_event = threading.Event()
        cancel_event.set()
        task = flaky_task(failures=100)

        with pytest.raises(RetryCancelledError) as exc_info:
            RetryExecutor().run(fast_policy, task, cancel_event=cancel_event)

        assert task.calls == 1
        assert exc_info.value.attempt == 1

    def test_cancel_from_handler_stops_retrying(self, flaky_task):
        """Test setting the event mid-run prevents further attempts."""
        cancel_event = threading.Event()
        task = flaky_task(failures=100)
        seen = []

        def handler(error):
            seen.append(error)
            if len(seen) == 2:
                cancel_event.set()

        policy = BackoffPolicy(cap_ms=2, base_ms=1, max_attempts=10)
        with pytest.raises(RetryCancelledError):
            RetryExecutor().run(policy, task, exception_handler=handler, cancel_event=cancel_event)

        assert task.calls == 2

    def test_cancel_from_other_thread_interrupts_wait(self, flaky_task):
        """Test a long wait returns promptly once the event is set."""
        cancel_event = threading.Event()
        timer = threading.Timer(0.05, cancel_event.set)
        policy = BackoffPolicy(cap_ms=30000, base_ms=30000, max_attempts=3)

        timer.start()
        try:
            with pytest.raises(RetryCancelledError) as exc_info:
                RetryExecutor().run(policy, flaky_task(failures=100), cancel_event=cancel_event)
        finally:
            timer.cancel()

        assert exc_info.value.wait_ms == 30000

    def test_unset_event_does_not_interfere(self, flaky_task, failure_log):
        """Test an unset event leaves the run untouched."""
        policy = BackoffPolicy(cap_ms=0, max_attempts=5)
        task = flaky_task(failures=2)

        result = RetryExecutor().run(
            policy, task, exception_handler=failure_log.append, cancel_event=threading.Event()
        )

        assert result.is_success
        assert task.calls == 3


class TestRunIsRepeatable:
    """Test cases for independent runs."""

    def test_identical_runs_identical_outcome(self, flaky_task, executor):
        """Test repeated runs start with a fresh counter."""
        policy = BackoffPolicy(base_ms=1, max_attempts=3)

        first = executor.run(policy, lambda: "value")
        second = executor.run(policy, lambda: "value")
        assert (first.status, first.data) == (second.status, second.data)

        failing = BackoffPolicy(base_ms=1, max_attempts=2)
        first = executor.run(failing, flaky_task(failures=100))
        second = executor.run(failing, flaky_task(failures=100))
        assert first.status == second.status == ExecutionResultStatus.EXCEEDED_MAX_ATTEMPTS
        assert first.attempts == second.attempts == 2

    def test_concurrent_runs_are_independent(self, flaky_task):
        """Test runs in parallel threads do not share attempt state."""
        executor = RetryExecutor()
        policy = BackoffPolicy(cap_ms=2, base_ms=1, max_attempts=5, jitter=True)
        tasks = [flaky_task(failures=n % 4) for n in range(8)]
        results = [None] * len(tasks)

        def worker(index):
            results[index] = executor.run(policy, tasks[index])

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(tasks))]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for index, result in enumerate(results):
            assert result.is_success
            assert result.attempts == index % 4 + 1


class TestLogging:
    """Test cases for retry diagnostics."""

    def test_failed_attempts_logged(self, flaky_task, executor, caplog):
        """Test each failure and the final give-up are logged as warnings."""
        with caplog.at_level(logging.DEBUG, logger="neo_backoff"):
            executor.run(BackoffPolicy(base_ms=1, max_attempts=2), flaky_task(failures=100))

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(warnings) == 3
        assert errors == []
        assert "Giving up after 2 attempt(s)" in warnings[-1].getMessage()

    def test_failure_warning_includes_wait(self, flaky_task, executor, caplog):
        """Test the per-failure warning names the upcoming wait."""
        with caplog.at_level(logging.WARNING, logger="neo_backoff"):
            executor.run(BackoffPolicy(base_ms=1, max_attempts=2), flaky_task(failures=100))

        messages = [r.getMessage() for r in caplog.records]
        assert "Attempt 1 failed (Fake exception 1); waiting 1 ms" in messages
        assert "Attempt 2 failed (Fake exception 2); waiting 2 ms" in messages

    def test_library_logger_has_null_handler(self):
        """Test importing the package installs a NullHandler on its logger."""
        handlers = logging.getLogger("neo_backoff").handlers
        assert any(isinstance(handler, logging.NullHandler) for handler in handlers)


def test_execute_with_backoff_helper(flaky_task, failure_log):
    """Test the module-level helper runs with a given policy."""
    task = flaky_task(failures=1)

    result = execute_with_backoff(
        task,
        policy=BackoffPolicy(cap_ms=0, max_attempts=3),
        exception_handler=failure_log.append,
    )

    assert result.data == "Fake result"
    assert task.calls == 2
    assert len(failure_log) == 1
