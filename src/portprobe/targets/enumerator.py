"""
Target Enumerator - Turns target lines and a port policy into scan tasks.

Features:
1. Port range parsing ("start-end", inclusive)
2. Target normalization (scheme and path stripping)
3. Host x port cross product
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

import structlog

from ..core.config import ConfigurationError
from .ports import TOP_PORTS


logger = structlog.get_logger(__name__)

MIN_PORT = 1
MAX_PORT = 65535

_RANGE_RE = re.compile(r"\s*(\d+)\s*-\s*(\d+)\s*", re.ASCII)

# Stand-in for bytes the input stream could not decode
UNDECODABLE = "\ufffd"


class InvalidRangeError(ConfigurationError):
    """Raised when a port range string is malformed or out of bounds"""
    pass


class NoTargetsError(Exception):
    """Raised when the target list is empty"""
    pass


@dataclass(frozen=True)
class ScanTask:
    """One (host, port) pair to grab a banner from"""
    host: str
    port: int


def parse_port_range(range_str: str) -> List[int]:
    """
    Expand an inclusive "start-end" port range.

    Args:
        range_str: Range such as "80-1000"

    Returns:
        Every port from start to end, ascending

    Raises:
        InvalidRangeError: If the string is not two integers joined by a
            single dash, or the bounds fall outside 1..65535 or are reversed
    """
    match = _RANGE_RE.fullmatch(range_str)
    if match is None:
        raise InvalidRangeError(f"invalid port range format: {range_str!r}")

    start, end = int(match.group(1)), int(match.group(2))

    if start < MIN_PORT or end > MAX_PORT or start > end:
        raise InvalidRangeError(f"invalid port range values: {range_str!r}")

    return list(range(start, end + 1))


def select_ports(port_range: str, top_ports: bool = False) -> List[int]:
    """Ports to scan: the well-known list if requested, else the parsed range"""
    if top_ports:
        return list(TOP_PORTS)
    return parse_port_range(port_range)


def sanitize_target(target: str) -> str:
    """
    Reduce a URL or host line to a bare host (with any port suffix kept).

    Examples:
        >>> sanitize_target("https://example.com/path")
        'example.com'
        >>> sanitize_target("http://example.com:8080/x/y")
        'example.com:8080'
    """
    target = target.strip()
    for scheme in ("http://", "https://"):
        if target.startswith(scheme):
            target = target[len(scheme):]
            break
    return target.split("/", 1)[0]


def read_targets(lines: Iterable[str]) -> List[str]:
    """
    Read one target per line, normalizing each.

    Args:
        lines: Any iterable of lines, typically sys.stdin

    Returns:
        Sanitized hosts in input order (blank and undecodable lines skipped)
    """
    targets = []
    for line in lines:
        host = sanitize_target(line)
        if not host:
            continue
        if UNDECODABLE in host:
            logger.warning("target_skipped", reason="undecodable", target=host)
            continue
        targets.append(host)

    logger.debug("targets_loaded", count=len(targets))
    return targets


def enumerate_tasks(targets: Sequence[str], ports: Sequence[int]) -> Iterator[ScanTask]:
    """
    Produce every (host, port) pair, host-major.

    Raises:
        NoTargetsError: If there are no targets
        ConfigurationError: If there are no ports
    """
    if not targets:
        raise NoTargetsError("No targets provided!")
    if not ports:
        raise ConfigurationError("no ports selected")

    return _cross_product(targets, ports)


def _cross_product(targets: Sequence[str], ports: Sequence[int]) -> Iterator[ScanTask]:
    for host in targets:
        for port in ports:
            yield ScanTask(host=host, port=port)
