from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import ParamSpec, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_never,
    wait_fixed,
)

from app.configs import file_logger
from app.errors import MailTransportError

logger = file_logger(getLogger(__name__))

# Type variables for retry decorator
P = ParamSpec("P")
T = TypeVar("T")
# Retriable exception types
RETRIABLE_EXCEPTIONS = (MailTransportError, ConnectionError, TimeoutError)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    """Log retry information before sleeping."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    # next_action contains the sleep duration
    sleep_duration = retry_state.next_action.sleep if retry_state.next_action else 0
    func_name = retry_state.fn.__name__ if retry_state.fn else "unknown"

    logger.warning(
        "Attempt %d of %s failed, retrying in %.2fs. Exception: %s",
        retry_state.attempt_number,
        func_name,
        sleep_duration,
        exception,
    )


def retry_until_success(
    delay: float = 5.0,
    exec_retry: tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async function on a fixed delay until it returns.

    Only ``exec_retry`` exceptions are retried; anything else propagates.
    Cancelling the awaiting task stops the loop.

    Args:
        delay: Seconds to wait between attempts.
        exec_retry: Tuple of exception types to retry on.

    Returns:
        Decorated function with retry logic.
    """
    return retry(
        stop=stop_never,
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_log_before_sleep,
        reraise=True,
    )
