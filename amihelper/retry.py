"""
Retry with exponential backoff for parameter lookups.

Only the parameter sources retry. The selection engine fails fast.
"""

import time
import functools
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple, Type


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


@dataclass(frozen=True)
class Backoff:
    """
    Delay schedule between attempts.

    Args:
        max_retries: Retries after the first attempt (0 = try once)
        base_delay: First delay in seconds
        max_delay: Upper bound for any single delay
        factor: Multiplier applied after each delay
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    factor: float = 2.0

    def delays(self) -> Iterator[float]:
        delay = self.base_delay
        for _ in range(self.max_retries):
            yield min(delay, self.max_delay)
            delay *= self.factor


def retrying(
    backoff: Backoff = Backoff(),
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
    sleep: Optional[Callable[[float], None]] = None,
):
    """
    Decorator retrying a call while it raises one of ``exceptions``.

    ``sleep`` defaults to time.sleep, looked up at call time.

    Example:
        @retrying(Backoff(max_retries=2), exceptions=(requests.exceptions.Timeout,))
        def fetch(url):
            return requests.get(url, timeout=15)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 0
            delays = backoff.delays()
            while True:
                attempt += 1
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    delay = next(delays, None)
                    if delay is None:
                        raise RetryError(f"Failed after {attempt} attempts: {e}") from e
                    if on_retry:
                        on_retry(attempt, e, delay)
                    (sleep or time.sleep)(delay)

        return wrapper
    return decorator


def should_retry_http_status(status_code: int) -> bool:
    """True for timeouts, rate limiting and transient server errors."""
    return status_code in {408, 429, 500, 502, 503, 504}
