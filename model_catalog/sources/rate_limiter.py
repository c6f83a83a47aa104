"""Exponential backoff schedule for source retries."""

import random


class RateLimiter:
    """Retry delay schedule with exponential backoff and jitter.

    The first retry waits ``initial_delay``; each further retry multiplies the
    delay by ``backoff_factor`` up to ``max_delay``.
    """

    def __init__(
        self,
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        backoff_factor: float = 2.0,
        jitter_factor: float = 0.1,
    ):
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter_factor = jitter_factor
        self._next_delay = initial_delay
        self._attempts = 0

    def reset(self) -> None:
        """Forget previous failures after a successful request."""
        self._next_delay = self.initial_delay
        self._attempts = 0

    def backoff(self) -> float:
        """Return the delay before the next retry and advance the schedule."""
        self._attempts += 1
        delay = min(self._next_delay, self.max_delay)
        self._next_delay = min(self._next_delay * self.backoff_factor, self.max_delay)
        # Jitter: +/- jitter_factor of the delay
        jitter = delay * self.jitter_factor * (2 * random.random() - 1)
        return max(delay + jitter, 0.0)

    @property
    def attempts(self) -> int:
        """Number of retries scheduled since the last reset."""
        return self._attempts
