"""
Adaptive Rate Limiter - Global pacing feedback shared by every scan worker.

This module implements a single process-wide rate factor that speeds up
when banners are coming back and slows down when attempts fail. Workers
multiply their jitter bounds by the factor, so one worker's failures
slow every other worker down.

Design Pattern: Adaptive Control System
"""

import threading
from dataclasses import dataclass
from typing import Optional

import structlog


@dataclass
class RateLimitConfig:
    """Configuration for rate limiter"""
    initial_factor: float = 1.0
    min_factor: float = 0.5
    max_factor: float = 2.0
    speedup_factor: float = 0.9   # Applied on every successful attempt
    slowdown_factor: float = 1.1  # Applied on every failed attempt


class AdaptiveRateLimiter:
    """
    Adaptive rate factor shared across concurrent scan workers.

    The factor is only reachable through synchronized methods; every
    update is a lock-guarded read-modify-write followed by a clamp to
    [min_factor, max_factor].

    Example:
        >>> limiter = AdaptiveRateLimiter()
        >>> limiter.on_outcome(success=False)
        >>> limiter.current_factor()
        1.1
    """

    def __init__(self, config: Optional[RateLimitConfig] = None):
        """
        Initialize the rate limiter.

        Args:
            config: Rate limit configuration (uses defaults if None)
        """
        self.config = config or RateLimitConfig()
        if not self.config.min_factor <= self.config.initial_factor <= self.config.max_factor:
            raise ValueError("initial_factor must lie within [min_factor, max_factor]")

        self._lock = threading.Lock()
        self._factor = self.config.initial_factor
        self._success_count = 0
        self._error_count = 0

        self.logger = structlog.get_logger(__name__)

    def on_outcome(self, success: bool) -> float:
        """
        Record one completed attempt and adjust the shared factor.

        Args:
            success: True if the attempt produced a banner

        Returns:
            The factor after the update
        """
        multiplier = self.config.speedup_factor if success else self.config.slowdown_factor

        with self._lock:
            old_factor = self._factor
            factor = old_factor * multiplier
            factor = max(self.config.min_factor, min(self.config.max_factor, factor))
            self._factor = factor

            if success:
                self._success_count += 1
            else:
                self._error_count += 1

        if factor != old_factor:
            self.logger.debug(
                "rate_factor_adjusted",
                success=success,
                old_factor=f"{old_factor:.3f}",
                new_factor=f"{factor:.3f}",
            )
        return factor

    def on_success(self) -> float:
        """Record a successful attempt (speeds up)"""
        return self.on_outcome(True)

    def on_error(self) -> float:
        """Record a failed attempt (slows down)"""
        return self.on_outcome(False)

    def current_factor(self) -> float:
        """Current pacing factor"""
        with self._lock:
            return self._factor

    def reset(self):
        """Reset the rate limiter to initial state"""
        with self._lock:
            self._factor = self.config.initial_factor
            self._success_count = 0
            self._error_count = 0

        self.logger.info("rate_limiter_reset")

    def get_stats(self) -> dict:
        """
        Get rate limiter statistics.

        Returns:
            Dictionary with current statistics
        """
        with self._lock:
            return {
                "current_factor": self._factor,
                "success_count": self._success_count,
                "error_count": self._error_count,
                "config": {
                    "min_factor": self.config.min_factor,
                    "max_factor": self.config.max_factor,
                },
            }
