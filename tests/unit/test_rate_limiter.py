"""
Unit tests for AdaptiveRateLimiter module.

Run with: pytest tests/unit/test_rate_limiter.py -v
"""

import random
import threading

import pytest

from portprobe.core.rate_limiter import AdaptiveRateLimiter, RateLimitConfig


class TestAdaptiveRateLimiter:
    """Test suite for AdaptiveRateLimiter class"""

    def test_initialization_with_defaults(self):
        """Test rate limiter starts at factor 1.0"""
        limiter = AdaptiveRateLimiter()

        assert limiter.current_factor() == 1.0
        stats = limiter.get_stats()
        assert stats["success_count"] == 0
        assert stats["error_count"] == 0

    def test_initialization_with_custom_config(self):
        """Test rate limiter honours a custom config"""
        config = RateLimitConfig(initial_factor=1.5, min_factor=1.0, max_factor=3.0)
        limiter = AdaptiveRateLimiter(config=config)

        assert limiter.current_factor() == 1.5
        assert limiter.config.max_factor == 3.0

    def test_initial_factor_outside_bounds_rejected(self):
        """Test an impossible initial factor is refused"""
        with pytest.raises(ValueError):
            AdaptiveRateLimiter(RateLimitConfig(initial_factor=5.0))

    def test_on_success_speeds_up(self):
        """Test a success multiplies the factor by 0.9"""
        limiter = AdaptiveRateLimiter()

        limiter.on_outcome(True)

        assert limiter.current_factor() == pytest.approx(0.9)
        assert limiter.get_stats()["success_count"] == 1

    def test_on_error_slows_down(self):
        """Test a failure multiplies the factor by 1.1"""
        limiter = AdaptiveRateLimiter()

        limiter.on_error()

        assert limiter.current_factor() == pytest.approx(1.1)
        assert limiter.get_stats()["error_count"] == 1

    def test_clamped_at_minimum(self):
        """Test repeated successes never push the factor below 0.5"""
        limiter = AdaptiveRateLimiter()

        for _ in range(50):
            limiter.on_success()

        assert limiter.current_factor() == 0.5

    def test_clamped_at_maximum(self):
        """Test repeated failures never push the factor above 2.0"""
        limiter = AdaptiveRateLimiter()

        for _ in range(50):
            limiter.on_error()

        assert limiter.current_factor() == 2.0

    def test_random_sequence_stays_in_bounds(self):
        """Test any success/failure sequence keeps the factor within [0.5, 2.0]"""
        limiter = AdaptiveRateLimiter()
        rng = random.Random(1234)

        for _ in range(2000):
            factor = limiter.on_outcome(rng.random() < 0.5)
            assert 0.5 <= factor <= 2.0

    def test_concurrent_updates_stay_in_bounds(self):
        """Test many threads updating at once neither lose updates nor escape the bounds"""
        limiter = AdaptiveRateLimiter()
        threads_count = 16
        updates = 2000
        violations = []

        def worker(seed):
            rng = random.Random(seed)
            for _ in range(updates):
                limiter.on_outcome(rng.random() < 0.5)
                factor = limiter.current_factor()
                if not 0.5 <= factor <= 2.0:
                    violations.append(factor)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stats = limiter.get_stats()
        assert violations == []
        assert stats["success_count"] + stats["error_count"] == threads_count * updates
        assert 0.5 <= limiter.current_factor() <= 2.0

    def test_reset(self):
        """Test reset() restores initial state"""
        limiter = AdaptiveRateLimiter()
        for _ in range(5):
            limiter.on_error()

        limiter.reset()

        assert limiter.current_factor() == 1.0
        assert limiter.get_stats()["error_count"] == 0

    def test_get_stats(self):
        """Test get_stats() returns correct information"""
        limiter = AdaptiveRateLimiter()
        limiter.on_success()
        limiter.on_error()
        limiter.on_error()

        stats = limiter.get_stats()

        assert "current_factor" in stats
        assert stats["success_count"] == 1
        assert stats["error_count"] == 2
        assert stats["config"]["min_factor"] == 0.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
