"""
Shared fixtures: fast scan configuration, recording delays and loopback servers.
"""

import asyncio
import contextlib
import socket

import pytest
import structlog

from portprobe.core import AdaptiveRateLimiter, Jitter, ScanConfig


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end scans against loopback listeners")


class RecordingDelay:
    """Delay source that never waits but remembers every requested range"""

    def __init__(self):
        self.calls = []

    def delay(self, low, high):
        self.calls.append((low, high))
        return 0.0


@pytest.fixture
def fast_config():
    """Scan config with short timeouts for loopback tests"""
    return ScanConfig(timeout=1.0, read_deadline=0.3, rate_limit=20)


@pytest.fixture
def recording_delay():
    return RecordingDelay()


@pytest.fixture
def rate_limiter():
    return AdaptiveRateLimiter()


@pytest.fixture
def jitter(rate_limiter, recording_delay):
    return Jitter(rate_limiter, source=recording_delay)


@pytest.fixture
def tcp_server():
    """
    Factory for loopback TCP servers.

    Usage:
        async with tcp_server(handler) as port:
            ...
    """

    @contextlib.asynccontextmanager
    async def _serve(handler, port=0):
        async def _guarded(reader, writer):
            try:
                await handler(reader, writer)
            except (ConnectionError, asyncio.IncompleteReadError):
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(_guarded, "127.0.0.1", port)
        try:
            yield server.sockets[0].getsockname()[1]
        finally:
            server.close()
            await server.wait_closed()

    return _serve


@pytest.fixture
def closed_port():
    """A loopback port with no listener"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI configures structlog globally; undo it after every test"""
    yield
    structlog.reset_defaults()
