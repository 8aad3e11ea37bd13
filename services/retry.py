"""Bounded retry with provider-driven waits"""

import logging
import time
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    func: Callable[[], T],
    max_attempts: int,
    should_retry: Callable[[Exception], bool],
    wait_for: Callable[[Exception, int], float],
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call func until it succeeds or the attempt budget runs out.

    Args:
        func: Zero-argument callable to invoke
        max_attempts: Total number of calls allowed (>= 1)
        should_retry: Decides whether an exception is worth another attempt
        wait_for: Seconds to wait before the next attempt, given the
                  exception and the attempt number that just failed
        sleep: Sleep function (injected by tests)

    Returns:
        Whatever func returns

    Raises:
        The last exception raised by func once the budget is exhausted,
        or the first exception rejected by should_retry.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")

    for attempt in range(1, max_attempts + 1):
        try:
            return func()
        except Exception as e:
            if not should_retry(e) or attempt == max_attempts:
                raise
            delay = max(wait_for(e, attempt), 0.0)
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed ({e}); retrying in {delay:.1f}s"
            )
            sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"Failed after {max_attempts} attempts")
