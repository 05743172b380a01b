"""Mini README: Pull-based rate limiting for expensive recomputations.

Structure:
    * Clock - callable returning the current time in seconds.
    * RateLimiter - runs a guarded action at most once per interval.

The limiter never schedules anything. Each ``attempt`` re-reads the clock
and either runs the action or returns immediately, which fits the
single-threaded event delivery of the perception system and needs no timer
thread or cancellation handling.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Clock = Callable[[], float]


class RateLimiter:
    """Invoke an action only when a minimum interval has passed since its last run.

    Not safe for concurrent callers; the engine drives it from one context.
    """

    def __init__(
        self,
        min_interval: float,
        action: Callable[[], None],
        *,
        clock: Clock = time.time,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self._action = action
        self._clock = clock
        self._last_success: Optional[float] = None

    @property
    def last_success(self) -> Optional[float]:
        """Timestamp of the most recent run, or ``None`` when it never ran."""

        return self._last_success

    def attempt(self) -> None:
        """Run the action if the interval has elapsed since the last run."""

        now = self._clock()
        if self._last_success is None or now - self._last_success > self.min_interval:
            self._action()
            self._last_success = now
        else:
            LOGGER.debug(
                "Rate limited: %.3fs since last run (minimum %.3fs)",
                now - self._last_success,
                self.min_interval,
            )

    def force(self) -> None:
        """Run the action now and restart the interval."""

        now = self._clock()
        self._action()
        self._last_success = now

    def __call__(self) -> None:
        self.attempt()
