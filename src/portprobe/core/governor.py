"""
Concurrency Governor - Fixed pool of admission tokens.

A worker holds one token for the whole banner grab and hands it back
exactly once. The governor also records how many tokens are out, which
is how the concurrency bound is observed.
"""

import asyncio


class ConcurrencyGovernor:
    """
    Counting semaphore with instrumentation.

    Example:
        >>> governor = ConcurrencyGovernor(limit=100)
        >>> await governor.acquire()
        >>> try:
        ...     await grab()
        ... finally:
        ...     governor.release()
    """

    def __init__(self, limit: int = 100):
        if limit < 1:
            raise ValueError("limit must be at least 1")

        self.limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self.active = 0
        self.peak = 0
        self.admitted = 0

    async def acquire(self):
        """Wait until a token is free and take it"""
        await self._semaphore.acquire()
        self.active += 1
        self.admitted += 1
        self.peak = max(self.peak, self.active)

    def release(self):
        """Return a token. Never blocks."""
        if self.active == 0:
            raise RuntimeError("release() called without a matching acquire()")
        self.active -= 1
        self._semaphore.release()

    @property
    def saturated(self) -> bool:
        return self.active >= self.limit

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.release()
        return False

    def get_stats(self) -> dict:
        return {
            "limit": self.limit,
            "active": self.active,
            "peak": self.peak,
            "admitted": self.admitted,
        }
