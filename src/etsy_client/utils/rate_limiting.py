"""
Rate limiting utilities for Etsy API calls.

Etsy reports the calls left in the current second through the
``X-Remaining-This-Second`` response header. After every successful call the
dispatcher pauses for a delay proportional to how far that counter has fallen
below the threshold, smoothing bursts without a token bucket or scheduler.
"""

import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Mapping, Optional

from etsy_client.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for the proportional throttle."""

    header_name: str = "X-Remaining-This-Second"
    default_remaining: int = 10  # assumed when the header is absent
    threshold: int = 8  # no delay while remaining >= threshold
    step: float = 0.1  # seconds of delay per call below the threshold


class RateLimiter:
    """
    Proportional throttle driven by response headers.

    ``delay = max(0, threshold - remaining) * step``; with the defaults a
    response reporting 0 remaining calls pauses the caller for 0.8 seconds.
    The limiter holds no queue: the pause is a synchronous sleep on the
    calling flow.
    """

    def __init__(self, config: Optional[RateLimitConfig] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config or RateLimitConfig()
        self._sleep = sleep
        self._lock = Lock()

        self.stats = {
            "total_responses": 0,
            "throttled_responses": 0,
            "total_delay": 0.0,
            "last_remaining": None,
        }

    def remaining_from_headers(self, headers: Optional[Mapping[str, Any]]) -> int:
        """Read the remaining-calls counter, falling back to the default."""
        if not headers:
            return self.config.default_remaining

        value = None
        target = self.config.header_name.lower()
        for key, header_value in headers.items():
            if key.lower() == target:
                value = header_value
                break

        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None or value == "":
            return self.config.default_remaining

        try:
            return int(float(value))
        except (TypeError, ValueError):
            logger.warning(f"Invalid {self.config.header_name} header: {value!r}, using default")
            return self.config.default_remaining

    def compute_delay(self, remaining: int) -> float:
        """Delay in seconds for the given remaining-calls counter."""
        delay = max(0, self.config.threshold - remaining) * self.config.step
        return round(delay, 6)

    def delay_for(self, headers: Optional[Mapping[str, Any]]) -> float:
        """Delay in seconds for a set of response headers."""
        return self.compute_delay(self.remaining_from_headers(headers))

    def throttle(self, headers: Optional[Mapping[str, Any]]) -> float:
        """
        Block the calling flow for the delay implied by ``headers``.

        Returns:
            The delay that was applied, in seconds.
        """
        remaining = self.remaining_from_headers(headers)
        delay = self.compute_delay(remaining)

        with self._lock:
            self.stats["total_responses"] += 1
            self.stats["last_remaining"] = remaining
            if delay > 0:
                self.stats["throttled_responses"] += 1
                self.stats["total_delay"] += delay

        if delay > 0:
            logger.debug(f"Throttling {delay:.2f}s ({remaining} calls remaining this second)")
            self._sleep(delay)

        return delay

    def get_status(self) -> Dict[str, Any]:
        """Get limiter configuration and statistics."""
        with self._lock:
            return {
                "config": {
                    "header_name": self.config.header_name,
                    "default_remaining": self.config.default_remaining,
                    "threshold": self.config.threshold,
                    "step": self.config.step,
                },
                "statistics": self.stats.copy(),
            }
