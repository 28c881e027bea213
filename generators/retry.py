import logging
import time
from typing import Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger("bedtale.generators.retry")


def backoff_delay(base_delay_sec: float, attempt_index: int) -> float:
    return base_delay_sec * (2 ** attempt_index)


def retry_with_backoff(
    func: Callable[[], T],
    is_retryable: Callable[[Exception], bool],
    attempts: int = 3,
    base_delay_sec: float = 1.0,
    context: str = "",
    sleep_fn: Callable[[float], None] = time.sleep,
) -> T:
    """
    Runs func until it succeeds, retrying only failures accepted by is_retryable.

    Attempt indexes start at 0 and the wait before the next attempt is
    base_delay_sec * 2**index (1s, 2s, 4s with the defaults). A non-retryable
    failure, or a retryable one on the last attempt, is re-raised unchanged.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1.")

    for attempt_index in range(attempts):
        try:
            return func()
        except Exception as error:
            if not is_retryable(error):
                raise
            if attempt_index == attempts - 1:
                logger.warning(
                    "RETRY_EXHAUSTED %s attempts=%d error=%s",
                    context,
                    attempts,
                    error,
                )
                raise
            delay = backoff_delay(base_delay_sec, attempt_index)
            logger.info(
                "RETRY %s attempt=%d/%d error=%s wait=%.1fs",
                context,
                attempt_index + 1,
                attempts,
                error,
                delay,
            )
            sleep_fn(delay)

    raise AssertionError("unreachable")
