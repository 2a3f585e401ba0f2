"""
Jitter - Randomized, rate-scaled delays.

Delay generation is pluggable so the protocol logic can be exercised
without real wall-clock waits.
"""

import asyncio
import random
from typing import Optional, Protocol, Tuple

from .rate_limiter import AdaptiveRateLimiter


class DelaySource(Protocol):
    """Anything that can pick a delay (seconds) within [low, high]"""

    def delay(self, low: float, high: float) -> float:
        ...


class RandomDelay:
    """Uniformly distributed delays"""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def delay(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)


class ZeroDelay:
    """Never waits. Used by tests and dry runs."""

    def delay(self, low: float, high: float) -> float:
        return 0.0


class Jitter:
    """
    Sleeps for a random delay whose bounds are scaled by the shared rate factor.

    Example:
        >>> jitter = Jitter(AdaptiveRateLimiter())
        >>> await jitter.sleep((0.5, 1.0))
    """

    def __init__(
        self,
        rate_limiter: AdaptiveRateLimiter,
        source: Optional[DelaySource] = None,
    ):
        self.rate_limiter = rate_limiter
        self.source = source or RandomDelay()

    def compute(self, bounds: Tuple[float, float]) -> float:
        factor = self.rate_limiter.current_factor()
        low, high = bounds
        return self.source.delay(low * factor, high * factor)

    async def sleep(self, bounds: Tuple[float, float]) -> float:
        delay = self.compute(bounds)
        await asyncio.sleep(delay)
        return delay
