"""
PORTPROBE - Adaptive TCP Banner Grabber

A reconnaissance scanner that connects to every (host, port) pair, coaxes
a service banner out of it with protocol seeds and line-terminator probes,
and paces itself with a shared adaptive rate factor.

Copyright (c) 2025
Licensed under MIT License
"""

__version__ = "1.0.0"
__author__ = "PORTPROBE Team"
__status__ = "Development"
