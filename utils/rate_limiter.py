"""Rate limiting utilities for LLM API calls.

Reviews and candidate suggestions may be requested for a whole metadata
file at once, so calls go through a sliding-window limiter.
"""

import os
import time
from collections import deque
from threading import Lock
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "PAIRCORPUS_LLM_RATE_LIMIT"

# Provider-specific defaults
PROVIDER_DEFAULTS = {
    "openai": {"max_calls": 60, "time_window": 60.0, "min_interval": 1.0},
    "anthropic": {"max_calls": 50, "time_window": 60.0, "min_interval": 1.2},
    "gemini": {"max_calls": 60, "time_window": 60.0, "min_interval": 1.0},
}


class RateLimitError(Exception):
    """Raised when rate limit is exceeded."""

    pass


class RateLimiter:
    """Rate limiter using a sliding window algorithm.

    At most ``max_calls`` calls are allowed in any ``time_window`` seconds,
    and consecutive calls are spaced by at least ``min_interval`` seconds.
    """

    def __init__(
        self,
        max_calls: int = 60,
        time_window: float = 60.0,
        min_interval: Optional[float] = None,
        clock=time.monotonic,
        sleep=time.sleep,
    ):
        self.max_calls = max_calls
        self.time_window = time_window
        self.min_interval = min_interval
        self.call_times: deque = deque()
        self.last_call_time: Optional[float] = None
        self.lock = Lock()
        self._clock = clock
        self._sleep = sleep
        logger.debug(
            f"RateLimiter initialized: max_calls={max_calls}, "
            f"time_window={time_window}s, min_interval={min_interval}s"
        )

    def _expire(self, now: float) -> None:
        cutoff_time = now - self.time_window
        while self.call_times and self.call_times[0] <= cutoff_time:
            self.call_times.popleft()

    def acquire(self, wait: bool = True, timeout: Optional[float] = None) -> bool:
        """Acquire permission to make an API call.

        Args:
            wait: If True, wait until rate limit allows the call
            timeout: Maximum time to wait in seconds (None = wait indefinitely)

        Returns:
            True if permission granted, False if timeout exceeded

        Raises:
            RateLimitError: If rate limit exceeded and wait=False
        """
        with self.lock:
            now = self._clock()

            if self.min_interval and self.last_call_time is not None:
                wait_time = self.min_interval - (now - self.last_call_time)
                if wait_time > 0:
                    if not wait:
                        raise RateLimitError(
                            f"Rate limit: minimum interval {self.min_interval}s not met. "
                            f"Wait {wait_time:.2f}s before next call."
                        )
                    if timeout is not None and wait_time > timeout:
                        return False
                    self._sleep(wait_time)
                    now = self._clock()

            self._expire(now)

            if len(self.call_times) >= self.max_calls:
                wait_time = self.time_window - (now - self.call_times[0])
                if not wait:
                    raise RateLimitError(
                        f"Rate limit exceeded: {self.max_calls} calls per {self.time_window}s. "
                        f"Wait {wait_time:.2f}s"
                    )
                if timeout is not None and wait_time > timeout:
                    logger.warning(
                        f"Rate limit wait time {wait_time:.2f}s exceeds timeout {timeout}s"
                    )
                    return False

                logger.info(f"Rate limit reached. Waiting {wait_time:.2f}s before next call...")
                self._sleep(wait_time)
                now = self._clock()
                self._expire(now)

            self.call_times.append(now)
            self.last_call_time = now
            return True

    def reset(self) -> None:
        """Reset rate limiter state."""
        with self.lock:
            self.call_times.clear()
            self.last_call_time = None
            logger.debug("Rate limiter reset")


def _env_number(name: str, cast):
    value = os.getenv(f"{ENV_PREFIX}_{name}")
    if not value:
        return None
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}_{name}={value!r}")
        return None


def get_rate_limiter(
    provider: Optional[str] = None,
    max_calls: Optional[int] = None,
    time_window: Optional[float] = None,
    min_interval: Optional[float] = None,
) -> RateLimiter:
    """Get a rate limiter with provider-specific defaults.

    Rate limits can be configured via environment variables:
    - PAIRCORPUS_LLM_RATE_LIMIT_MAX_CALLS: Maximum calls per window
    - PAIRCORPUS_LLM_RATE_LIMIT_TIME_WINDOW: Time window in seconds
    - PAIRCORPUS_LLM_RATE_LIMIT_MIN_INTERVAL: Minimum interval between calls

    Precedence: explicit argument > environment > provider default.

    Args:
        provider: LLM provider name (for provider-specific defaults)
        max_calls: Override max calls
        time_window: Override time window
        min_interval: Override min interval

    Returns:
        Configured RateLimiter instance
    """
    defaults = PROVIDER_DEFAULTS.get(provider or "", {})

    if max_calls is None:
        max_calls = _env_number("MAX_CALLS", int) or defaults.get("max_calls", 60)
    if time_window is None:
        time_window = _env_number("TIME_WINDOW", float) or defaults.get("time_window", 60.0)
    if min_interval is None:
        min_interval = _env_number("MIN_INTERVAL", float)
        if min_interval is None:
            min_interval = defaults.get("min_interval", 1.0)

    return RateLimiter(
        max_calls=max_calls,
        time_window=time_window,
        min_interval=min_interval,
    )
