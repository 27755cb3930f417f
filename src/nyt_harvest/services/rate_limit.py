"""
Delay policies for rate-limited APIs.

The harvester calls wait() immediately before every request. The provider
allows at most 5 calls/second and 1000/day; FixedDelay keeps the simple,
conservative one-second spacing, TokenBucket allows short bursts, and
NoDelay lets tests run without sleeping.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union
import logging
import time

logger = logging.getLogger(__name__)


class DelayPolicy(ABC):
    """Strategy invoked before each API call."""

    @abstractmethod
    def wait(self) -> None:
        """Block until the next call is allowed."""


class NoDelay(DelayPolicy):
    """Never waits."""

    def wait(self) -> None:
        return None

    def __repr__(self) -> str:
        return "NoDelay()"


class FixedDelay(DelayPolicy):
    """
    Sleep a fixed interval before every call, including the first.

    Example:
        >>> policy = FixedDelay(1.0)
        >>> policy.wait()  # sleeps 1 second
    """

    def __init__(self, seconds: float, sleep: Optional[Callable[[float], None]] = None):
        if seconds < 0:
            raise ValueError(f"Delay must be non-negative, got: {seconds}")
        self.seconds = float(seconds)
        self._sleep = sleep or time.sleep

    def wait(self) -> None:
        if self.seconds > 0:
            self._sleep(self.seconds)

    def __repr__(self) -> str:
        return f"FixedDelay(seconds={self.seconds})"


class TokenBucket(DelayPolicy):
    """
    Token bucket limiter.

    Starts full with `capacity` tokens, refills at `rate` tokens per second,
    and each call consumes one token. When the bucket is empty, wait() sleeps
    just long enough for one token to accrue.

    Args:
        rate: Tokens added per second (sustained calls/sec)
        capacity: Maximum burst size
        clock: Monotonic clock, injectable for tests
        sleep: Sleep function, injectable for tests
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None
    ):
        if rate <= 0:
            raise ValueError(f"Rate must be positive, got: {rate}")
        if capacity < 1:
            raise ValueError(f"Capacity must be at least 1, got: {capacity}")
        self.rate = float(rate)
        self.capacity = capacity
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._tokens = float(capacity)
        self._last = self._clock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last)
        self._tokens = min(float(self.capacity), self._tokens + elapsed * self.rate)
        self._last = now

    def wait(self) -> None:
        self._refill()
        if self._tokens < 1.0:
            pause = (1.0 - self._tokens) / self.rate
            logger.debug(f"Token bucket empty, sleeping {pause:.3f}s")
            self._sleep(pause)
            self._tokens = 1.0
            self._last = self._clock()
        self._tokens -= 1.0

    def __repr__(self) -> str:
        return f"TokenBucket(rate={self.rate}, capacity={self.capacity})"


def build_delay_policy(value: Union[None, int, float, DelayPolicy]) -> DelayPolicy:
    """
    Coerce a delay setting into a DelayPolicy.

    Args:
        value: None (no delay), seconds as a number, or a DelayPolicy

    Returns:
        DelayPolicy instance

    Example:
        >>> build_delay_policy(1.5)
        FixedDelay(seconds=1.5)
        >>> build_delay_policy(None)
        NoDelay()
    """
    if value is None:
        return NoDelay()
    if isinstance(value, DelayPolicy):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Unsupported delay setting: {value!r}")
    return FixedDelay(value) if value != 0 else NoDelay()
