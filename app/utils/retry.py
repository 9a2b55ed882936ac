"""
Bounded retry with exponential backoff for async operations.

Wraps a zero-argument coroutine factory. Failures are classified by an
injectable predicate: non-retriable errors propagate after one attempt,
retriable ones are retried until the attempt budget is spent, at which
point a RetryExhaustedError names the attempt count.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from app.exceptions import NonRetriableError, RetryExhaustedError

T = TypeVar("T")

_logger = logging.getLogger(__name__)

# Client-side failures: retrying the same request cannot fix them.
NON_RETRIABLE_PATTERNS: tuple[str, ...] = (
    "invalid",
    "bad request",
    "unauthorized",
    "forbidden",
    "not found",
    "validation",
)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.backoff_multiplier < 0:
            raise ValueError("delays must not be negative")

    def delay_for(self, attempt_number: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return self.initial_delay * self.backoff_multiplier ** (attempt_number - 1)


def is_retriable_error(error: BaseException) -> bool:
    """Default classifier: anything that does not look like a client error."""
    if isinstance(error, NonRetriableError):
        return False
    message = str(error).lower()
    return not any(pattern in message for pattern in NON_RETRIABLE_PATTERNS)


def _make_before_sleep(
    policy: RetryPolicy,
    on_retry: Callable[[int, BaseException], None] | None,
    logger: logging.Logger,
) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if retry_state.next_action is not None:
            delay = retry_state.next_action.sleep
        else:
            delay = policy.delay_for(retry_state.attempt_number)
        logger.warning(
            "Attempt %d failed, retrying in %.2fs: %s",
            retry_state.attempt_number,
            delay,
            error,
        )
        if on_retry is None or error is None:
            return
        try:
            on_retry(retry_state.attempt_number, error)
        except Exception as e:
            logger.warning("on_retry hook raised and was ignored: %s", e)

    return before_sleep


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    on_retry: Callable[[int, BaseException], None] | None = None,
    is_retriable: Callable[[BaseException], bool] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    logger: logging.Logger | None = None,
) -> T:
    """
    Run ``operation`` with retries.

    Args:
        operation: Coroutine factory, called once per attempt
        policy: Attempt budget and backoff (defaults: 3 attempts, 1s, x2)
        on_retry: Called with (attempt_number, error) before each backoff wait.
            Exceptions it raises are logged and ignored.
        is_retriable: Classification predicate (defaults to is_retriable_error)
        sleep: Awaitable used for the backoff wait; cancelling the caller
            interrupts it immediately
        logger: Logger for retry warnings

    Returns:
        The operation's result

    Raises:
        RetryExhaustedError: The attempt budget ran out on retriable errors
        Exception: A non-retriable error, unchanged, after a single attempt
    """
    policy = policy or RetryPolicy()
    classify = is_retriable or is_retriable_error

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(
            multiplier=policy.initial_delay,
            exp_base=policy.backoff_multiplier,
        ),
        # CancelledError and friends are BaseException: never retried.
        retry=retry_if_exception(lambda e: isinstance(e, Exception) and classify(e)),
        before_sleep=_make_before_sleep(policy, on_retry, logger or _logger),
        sleep=sleep,
    )

    try:
        async for attempt in retrying:
            with attempt:
                return await operation()
    except RetryError as e:
        last_error = e.last_attempt.exception()
        if last_error is None:
            raise
        raise RetryExhaustedError(policy.max_attempts, last_error) from last_error
