"""
Unit tests for retry_with_backoff.

Backoff waits go through an injected fake sleep, so most tests run instantly
and can assert the exact delay schedule.
"""

import asyncio
import logging
import time

import pytest

from app.exceptions import ContentBlockedError, RetryExhaustedError
from app.utils.retry import RetryPolicy, is_retriable_error, retry_with_backoff


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FlakyOperation:
    """Fails with the given errors in turn, then returns ``result``."""

    def __init__(self, errors: list[Exception], result: str = "ok") -> None:
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


class AlwaysFails:
    def __init__(self, message: str) -> None:
        self.message = message
        self.calls = 0
        self.call_times: list[float] = []

    async def __call__(self) -> str:
        self.calls += 1
        self.call_times.append(time.monotonic())
        raise RuntimeError(self.message)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


class TestRetryPolicy:
    """Test cases for RetryPolicy validation and delay math."""

    def test_defaults(self) -> None:
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.initial_delay == 1.0
        assert policy.backoff_multiplier == 2.0

    def test_delay_grows_exponentially(self) -> None:
        policy = RetryPolicy(initial_delay=2.0, backoff_multiplier=2.0)

        assert [policy.delay_for(n) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_rejects_negative_delay(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(initial_delay=-1.0)


class TestIsRetriableError:
    """Test cases for the default error classifier."""

    @pytest.mark.parametrize(
        "message",
        [
            "Invalid argument",
            "400 Bad Request",
            "401 UNAUTHORIZED",
            "403 Forbidden",
            "404 model Not Found",
            "Validation failed for field",
        ],
    )
    def test_client_errors_are_not_retriable(self, message: str) -> None:
        assert is_retriable_error(RuntimeError(message)) is False

    @pytest.mark.parametrize(
        "message",
        [
            "503 Service Unavailable",
            "Connection reset by peer",
            "Read timed out",
            "No image data found in the API response.",
        ],
    )
    def test_transient_errors_are_retriable(self, message: str) -> None:
        assert is_retriable_error(RuntimeError(message)) is True

    def test_non_retriable_marker_wins_over_message(self) -> None:
        assert is_retriable_error(ContentBlockedError("blocked: SAFETY")) is False


class TestRetryWithBackoff:
    """Test cases for retry_with_backoff()."""

    @pytest.mark.asyncio
    async def test_returns_first_success_without_sleeping(
        self, fake_sleep: FakeSleep
    ) -> None:
        operation = FlakyOperation([])

        result = await retry_with_backoff(operation, sleep=fake_sleep)

        assert result == "ok"
        assert operation.calls == 1
        assert fake_sleep.delays == []

    @pytest.mark.asyncio
    async def test_exhaustion_follows_backoff_schedule(
        self, fake_sleep: FakeSleep
    ) -> None:
        """Three attempts, waits of d then 2d, wrapped final error."""
        operation = AlwaysFails("network timeout")
        policy = RetryPolicy(max_attempts=3, initial_delay=0.5, backoff_multiplier=2)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await retry_with_backoff(operation, policy, sleep=fake_sleep)

        assert operation.calls == 3
        assert fake_sleep.delays == pytest.approx([0.5, 1.0])
        assert str(exc_info.value).startswith("Failed after 3 attempts")
        assert "network timeout" in str(exc_info.value)
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_error, RuntimeError)
        assert exc_info.value.__cause__ is exc_info.value.last_error

    @pytest.mark.asyncio
    async def test_plain_factory_returning_coroutine_is_awaited(
        self, fake_sleep: FakeSleep
    ) -> None:
        """A lambda wrapping a coroutine call is retried like an async function."""
        calls = 0

        async def request() -> str:
            nonlocal calls
            calls += 1
            raise RuntimeError("503 unavailable")

        with pytest.raises(RetryExhaustedError, match="Failed after 3 attempts"):
            await retry_with_backoff(lambda: request(), sleep=fake_sleep)

        assert calls == 3
        assert fake_sleep.delays == pytest.approx([1.0, 2.0])

    @pytest.mark.asyncio
    async def test_plain_factory_returns_awaited_result(
        self, fake_sleep: FakeSleep
    ) -> None:
        operation = FlakyOperation([RuntimeError("timeout")], result="image")

        result = await retry_with_backoff(lambda: operation(), sleep=fake_sleep)

        assert result == "image"
        assert operation.calls == 2

    @pytest.mark.asyncio
    async def test_logs_one_warning_per_retry(
        self, fake_sleep: FakeSleep, caplog
    ) -> None:
        operation = FlakyOperation([RuntimeError("timeout"), RuntimeError("timeout")])

        with caplog.at_level(logging.WARNING, logger="RetryTest"):
            await retry_with_backoff(
                operation,
                RetryPolicy(initial_delay=0.5),
                sleep=fake_sleep,
                logger=logging.getLogger("RetryTest"),
            )

        messages = [r.getMessage() for r in caplog.records if r.name == "RetryTest"]
        assert len(messages) == 2
        assert "retrying in 0.50s" in messages[0]
        assert "retrying in 1.00s" in messages[1]

    @pytest.mark.asyncio
    async def test_real_waits_between_attempts(self) -> None:
        """Gaps between invocations match d and 2d within scheduling tolerance."""
        delay = 0.05
        operation = AlwaysFails("server overloaded")
        policy = RetryPolicy(max_attempts=3, initial_delay=delay, backoff_multiplier=2)

        with pytest.raises(RetryExhaustedError, match="Failed after 3 attempts"):
            await retry_with_backoff(operation, policy)

        first_gap = operation.call_times[1] - operation.call_times[0]
        second_gap = operation.call_times[2] - operation.call_times[1]
        assert first_gap >= delay * 0.9
        assert second_gap >= 2 * delay * 0.9
        assert second_gap < 2 * delay + 1.0

    @pytest.mark.asyncio
    async def test_unauthorized_is_attempted_once(self, fake_sleep: FakeSleep) -> None:
        operation = AlwaysFails("401 Unauthorized: API key not valid")
        policy = RetryPolicy(max_attempts=5, initial_delay=1.0)

        with pytest.raises(RuntimeError, match="Unauthorized"):
            await retry_with_backoff(operation, policy, sleep=fake_sleep)

        assert operation.calls == 1
        assert fake_sleep.delays == []

    @pytest.mark.asyncio
    async def test_non_retriable_error_is_not_wrapped(
        self, fake_sleep: FakeSleep
    ) -> None:
        error = ContentBlockedError("Request blocked by the model: SAFETY", "SAFETY")
        operation = FlakyOperation([error])

        with pytest.raises(ContentBlockedError) as exc_info:
            await retry_with_backoff(operation, sleep=fake_sleep)

        assert exc_info.value is error
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(
        self, fake_sleep: FakeSleep
    ) -> None:
        operation = FlakyOperation(
            [RuntimeError("503 unavailable"), RuntimeError("timeout")], result="image"
        )
        retries: list[tuple[int, str]] = []

        result = await retry_with_backoff(
            operation,
            RetryPolicy(max_attempts=3, initial_delay=2.0),
            on_retry=lambda attempt, error: retries.append((attempt, str(error))),
            sleep=fake_sleep,
        )

        assert result == "image"
        assert operation.calls == 3
        assert retries == [(1, "503 unavailable"), (2, "timeout")]
        assert fake_sleep.delays == pytest.approx([2.0, 4.0])

    @pytest.mark.asyncio
    async def test_failing_on_retry_hook_is_ignored(
        self, fake_sleep: FakeSleep
    ) -> None:
        operation = FlakyOperation([RuntimeError("timeout")])

        def broken_hook(attempt: int, error: BaseException) -> None:
            raise RuntimeError("hook exploded")

        result = await retry_with_backoff(
            operation, on_retry=broken_hook, sleep=fake_sleep
        )

        assert result == "ok"
        assert operation.calls == 2

    @pytest.mark.asyncio
    async def test_single_attempt_budget(self, fake_sleep: FakeSleep) -> None:
        operation = AlwaysFails("connection reset")

        with pytest.raises(RetryExhaustedError, match="Failed after 1 attempts"):
            await retry_with_backoff(
                operation, RetryPolicy(max_attempts=1), sleep=fake_sleep
            )

        assert operation.calls == 1
        assert fake_sleep.delays == []

    @pytest.mark.asyncio
    async def test_custom_classifier_is_used(self, fake_sleep: FakeSleep) -> None:
        operation = FlakyOperation([RuntimeError("503 unavailable")])

        with pytest.raises(RuntimeError, match="503"):
            await retry_with_backoff(
                operation,
                is_retriable=lambda error: isinstance(error, ConnectionError),
                sleep=fake_sleep,
            )

        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_cancellation_interrupts_backoff(self) -> None:
        """Cancelling the caller stops the backoff wait right away."""
        operation = AlwaysFails("timeout")
        policy = RetryPolicy(max_attempts=3, initial_delay=30.0)

        task = asyncio.create_task(retry_with_backoff(operation, policy))
        while operation.calls == 0:
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.01)

        started = time.monotonic()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert time.monotonic() - started < 1.0
        assert operation.calls == 1
