"""Mini README: Timing helpers used by the trackers.

Currently exports the pull-based ``RateLimiter``.
"""

from .rate_limiter import Clock, RateLimiter

__all__ = ["Clock", "RateLimiter"]
