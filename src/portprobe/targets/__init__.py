"""
Targets module - What gets scanned.

This package turns raw target lines and a port policy into scan tasks:
- parse_port_range / select_ports: Port selection
- sanitize_target / read_targets: Target normalization
- enumerate_tasks: Host x port cross product
"""

from .enumerator import (
    ScanTask,
    InvalidRangeError,
    NoTargetsError,
    parse_port_range,
    select_ports,
    sanitize_target,
    read_targets,
    enumerate_tasks,
)
from .ports import TOP_PORTS


__all__ = [
    # Data structures
    "ScanTask",
    "TOP_PORTS",
    # Exceptions
    "InvalidRangeError",
    "NoTargetsError",
    # Enumeration
    "parse_port_range",
    "select_ports",
    "sanitize_target",
    "read_targets",
    "enumerate_tasks",
]
