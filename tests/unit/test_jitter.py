"""
Unit tests for the jitter helpers.

Run with: pytest tests/unit/test_jitter.py -v
"""

import pytest

from portprobe.core import AdaptiveRateLimiter, Jitter, RandomDelay, ZeroDelay


class TestDelaySources:
    """Test suite for delay sources"""

    def test_random_delay_within_bounds(self):
        """Test RandomDelay stays inside the requested range"""
        source = RandomDelay(seed=7)

        for _ in range(500):
            assert 0.5 <= source.delay(0.5, 1.0) <= 1.0

    def test_random_delay_seeded_is_repeatable(self):
        """Test two sources with the same seed agree"""
        a, b = RandomDelay(seed=42), RandomDelay(seed=42)

        assert [a.delay(1, 3) for _ in range(5)] == [b.delay(1, 3) for _ in range(5)]

    def test_zero_delay(self):
        """Test ZeroDelay never waits"""
        assert ZeroDelay().delay(1.0, 3.0) == 0.0


class TestJitter:
    """Test suite for Jitter"""

    def test_bounds_scaled_by_rate_factor(self, rate_limiter, recording_delay):
        """Test both bounds are multiplied by the current factor"""
        jitter = Jitter(rate_limiter, source=recording_delay)

        jitter.compute((1.0, 3.0))
        for _ in range(50):
            rate_limiter.on_error()
        jitter.compute((1.0, 3.0))

        assert recording_delay.calls[0] == (1.0, 3.0)
        assert recording_delay.calls[1] == pytest.approx((2.0, 6.0))

    @pytest.mark.asyncio
    async def test_sleep_returns_delay(self):
        """Test sleep() waits for the computed delay"""
        jitter = Jitter(AdaptiveRateLimiter(), source=ZeroDelay())

        assert await jitter.sleep((0.5, 1.0)) == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
