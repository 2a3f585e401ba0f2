"""
Banner Grabber - Connect, seed, probe and read a service banner.

Each port gets up to `retries` attempts. One attempt walks through:

    Connecting -> Seeding -> Probing -> Reading -> Success | Retry | Failed

Connection failures and empty reads are retried after a wide jitter;
probe writes and reads are separated by a narrow jitter. Every finished
attempt reports its outcome to the shared rate limiter, whose factor in
turn scales all jitter bounds.
"""

import asyncio
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

from ..core.config import ScanConfig
from ..core.jitter import Jitter
from ..core.rate_limiter import AdaptiveRateLimiter
from ..targets import ScanTask


class GrabState(Enum):
    """Banner grab protocol states"""
    CONNECTING = "connecting"
    SEEDING = "seeding"
    PROBING = "probing"
    READING = "reading"
    SUCCESS = "success"
    RETRY = "retry"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanResult:
    """A non-empty banner read from host:port"""
    host: str
    port: int
    banner: str

    def format(self) -> str:
        return f"{self.host}:{self.port} - {self.banner}"


class BannerGrabber:
    """
    Runs the banner grab protocol against one (host, port) pair at a time.

    Instances are stateless between calls and safe to share across
    concurrent workers; the only shared state is the rate limiter.

    Example:
        >>> grabber = BannerGrabber(ScanConfig(), AdaptiveRateLimiter())
        >>> banner = await grabber.grab("127.0.0.1", 22)
        >>> print(banner or "no banner")
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        rate_limiter: Optional[AdaptiveRateLimiter] = None,
        jitter: Optional[Jitter] = None,
    ):
        """
        Initialize banner grabber.

        Args:
            config: Scan configuration (timeouts, probes, seeds, jitter bounds)
            rate_limiter: Shared adaptive rate limiter
            jitter: Delay generator (a random one bound to rate_limiter if None)
        """
        self.config = config or ScanConfig()
        self.rate_limiter = rate_limiter or AdaptiveRateLimiter()
        self.jitter = jitter or Jitter(self.rate_limiter)

        self.probes = [probe.encode() for probe in self.config.probes]

        self.logger = structlog.get_logger(__name__)

    async def scan(self, task: ScanTask) -> Optional[ScanResult]:
        """
        Grab a banner for a scan task.

        Returns:
            ScanResult if a banner was read, None otherwise
        """
        await self.jitter.sleep(self.config.pre_scan_jitter)

        banner = await self.grab(task.host, task.port)
        if not banner:
            return None
        return ScanResult(host=task.host, port=task.port, banner=banner)

    async def grab(self, host: str, port: int) -> str:
        """
        Run up to `retries` attempts and return the first non-empty banner.

        Args:
            host: Target host
            port: Target TCP port

        Returns:
            Whitespace-trimmed banner, or "" once every attempt came back empty
        """
        for attempt in range(1, self.config.retries + 1):
            banner = await self._attempt(host, port, attempt)

            if banner:
                self.rate_limiter.on_outcome(True)
                self._log_state(GrabState.SUCCESS, host, port, attempt)
                self.logger.info(
                    "banner_grabbed",
                    host=host,
                    port=port,
                    attempt=attempt,
                    size=len(banner),
                )
                return banner

            self.rate_limiter.on_outcome(False)

            if attempt < self.config.retries:
                self._log_state(GrabState.RETRY, host, port, attempt)
                await self.jitter.sleep(self.config.connect_jitter)

        self._log_state(GrabState.FAILED, host, port, self.config.retries)
        return ""

    async def _attempt(self, host: str, port: int, attempt: int) -> str:
        """One pass through Connecting -> Seeding -> Probing -> Reading"""
        self._log_state(GrabState.CONNECTING, host, port, attempt)

        try:
            sock = await asyncio.wait_for(
                self._connect(host, port),
                timeout=self.config.timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            self.logger.debug(
                "connect_failed",
                host=host,
                port=port,
                attempt=attempt,
                error=str(e) or type(e).__name__,
            )
            return ""

        try:
            seed = self.config.seeds.get(port)
            if seed:
                self._log_state(GrabState.SEEDING, host, port, attempt)
                await self._send(sock, seed, host, port)

            self._log_state(GrabState.PROBING, host, port, attempt)
            for probe in self.probes:
                await self._send(sock, probe, host, port)
                await self.jitter.sleep(self.config.probe_jitter)

            self._log_state(GrabState.READING, host, port, attempt)
            data = await self._read(sock)
        finally:
            sock.close()

        return data.decode("utf-8", errors="replace").strip()

    async def _connect(self, host: str, port: int) -> socket.socket:
        """Resolve host and open a non-blocking TCP connection"""
        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        family, sock_type, proto, _, address = infos[0]

        sock = socket.socket(family, sock_type, proto)
        sock.setblocking(False)
        try:
            await loop.sock_connect(sock, address)
        except BaseException:
            sock.close()
            raise
        return sock

    async def _send(self, sock: socket.socket, payload: bytes, host: str, port: int):
        """Write a seed or probe. Write errors are left for the read phase to surface."""
        loop = asyncio.get_running_loop()
        try:
            await loop.sock_sendall(sock, payload)
        except OSError as e:
            self.logger.debug("probe_write_failed", host=host, port=port, error=str(e))

    async def _read(self, sock: socket.socket) -> bytes:
        """
        Read up to `read_attempts` chunks within a fixed deadline.

        Stops early on a read error, a zero-byte read or deadline expiry.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.read_deadline
        chunks = []

        for _ in range(self.config.read_attempts):
            remaining = deadline - loop.time()
            if remaining <= 0:
                break

            try:
                chunk = await asyncio.wait_for(
                    loop.sock_recv(sock, self.config.read_size),
                    timeout=remaining,
                )
            except (OSError, asyncio.TimeoutError):
                break

            if not chunk:
                break

            chunks.append(chunk)
            await self.jitter.sleep(self.config.probe_jitter)

        return b"".join(chunks)

    def _log_state(self, state: GrabState, host: str, port: int, attempt: int):
        self.logger.debug("grab_state", state=state.value, host=host, port=port, attempt=attempt)
