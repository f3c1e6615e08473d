"""
Bounded retry helper.

The clock and sleep functions are injectable so the wall-clock window can be
exercised in tests without waiting.
"""

import time
from typing import Callable, TypeVar

from ..logger import logger

T = TypeVar("T")


class RetryWindowExceeded(Exception):
    """Raised when the retry window closes before the operation succeeds."""

    def __init__(self, timeout_seconds: float, attempts: int):
        self.timeout_seconds = timeout_seconds
        self.attempts = attempts
        super().__init__(
            f"Operation did not succeed within {timeout_seconds}s ({attempts} attempts)"
        )


def retry_until_timeout(
    operation: Callable[[], T],
    is_retryable: Callable[[Exception], bool],
    timeout_seconds: float,
    delay_seconds: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call operation until it succeeds, a non-retryable error occurs, or time runs out.

    Args:
        operation: Zero-argument callable to attempt
        is_retryable: Returns True for exceptions worth another attempt
        timeout_seconds: Wall-clock window measured from the first attempt
        delay_seconds: Pause between attempts
        clock: Monotonic time source
        sleep: Sleep function

    Returns:
        The operation's return value

    Raises:
        RetryWindowExceeded: If the window closes before a successful attempt
        Exception: Any non-retryable error raised by operation, unchanged
    """
    deadline = clock() + timeout_seconds
    attempts = 0
    while clock() < deadline:
        attempts += 1
        try:
            return operation()
        except Exception as e:
            if not is_retryable(e):
                raise
            logger.debug(f"Attempt {attempts} failed with retryable error: {e}")
            sleep(delay_seconds)

    raise RetryWindowExceeded(timeout_seconds, attempts)
