"""
Core module - Shared scanning primitives.

This package contains the pieces every scan worker touches:
configuration, the adaptive rate limiter, jitter, the concurrency
governor and the result sink. The orchestrator lives in
core.orchestrator and is imported from there.
"""

from .config import ConfigurationError, ScanConfig, build_config
from .rate_limiter import AdaptiveRateLimiter, RateLimitConfig
from .jitter import DelaySource, Jitter, RandomDelay, ZeroDelay
from .governor import ConcurrencyGovernor
from .sink import ResultSink


__all__ = [
    # Configuration
    "ConfigurationError",
    "ScanConfig",
    "build_config",
    # Rate limiting
    "AdaptiveRateLimiter",
    "RateLimitConfig",
    "DelaySource",
    "Jitter",
    "RandomDelay",
    "ZeroDelay",
    # Dispatch
    "ConcurrencyGovernor",
    "ResultSink",
]
