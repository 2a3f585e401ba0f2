"""
Scan configuration - Validated knobs for the scanning engine.

All defaults mirror the command line defaults. A YAML file can provide
a base configuration; explicit overrides (usually CLI flags) win.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


class ConfigurationError(Exception):
    """Raised when the scan cannot start because its configuration is invalid"""
    pass


DEFAULT_PROBES = ["\r\n", "\r\n\r\n", "\n\n"]

DEFAULT_SEEDS: Dict[int, bytes] = {
    21: b"USER anonymous\r\n",
    3306: b"\x03SELECT VERSION();",
}

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class ScanConfig(BaseModel):
    """Configuration for the banner scan"""

    # Port selection
    port_range: str = "1-65535"
    top_ports: bool = False

    # Connection
    timeout: float = Field(5.0, gt=0, description="Connect timeout per attempt (seconds)")
    rate_limit: int = Field(100, ge=1, description="Max simultaneous in-flight scans")
    retries: int = Field(3, ge=1, description="Attempts per port")

    # Reading
    read_deadline: float = Field(5.0, gt=0, description="Read window per attempt (seconds)")
    read_attempts: int = Field(5, ge=1)
    read_size: int = Field(4096, ge=1)

    # Probing
    probes: List[str] = Field(default_factory=lambda: list(DEFAULT_PROBES))
    seeds: Dict[int, bytes] = Field(default_factory=lambda: dict(DEFAULT_SEEDS))

    # Jitter bounds in seconds, scaled by the adaptive rate factor
    connect_jitter: Tuple[float, float] = (1.0, 3.0)
    probe_jitter: Tuple[float, float] = (0.5, 1.0)
    pre_scan_jitter: Tuple[float, float] = (0.1, 0.5)

    # Logging
    log_level: str = "warning"

    @field_validator("connect_jitter", "probe_jitter", "pre_scan_jitter")
    @classmethod
    def validate_jitter(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        low, high = v
        if low < 0 or high < low:
            raise ValueError("jitter bounds must satisfy 0 <= low <= high")
        return v

    @field_validator("seeds")
    @classmethod
    def validate_seed_ports(cls, v: Dict[int, bytes]) -> Dict[int, bytes]:
        for port in v:
            if not 1 <= port <= 65535:
                raise ValueError(f"seed port out of range: {port}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.lower()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v


def build_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ScanConfig:
    """
    Build a ScanConfig from an optional YAML file plus overrides.

    Args:
        path: YAML file with ScanConfig fields at the top level
        overrides: Field values that take precedence over the file;
            None values are ignored so unset CLI flags fall through

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    data: Dict[str, Any] = {}

    if path is not None:
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"cannot load config file {path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"config file {path} must contain a mapping")
        data.update(loaded)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return ScanConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
