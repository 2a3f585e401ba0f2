"""
Scanners module.

This package contains the banner grab protocol:
- BannerGrabber: Connect / seed / probe / read with retries
- ScanResult: A non-empty banner for one host:port
"""

from .banner_grabber import BannerGrabber, GrabState, ScanResult


__all__ = [
    "BannerGrabber",
    "GrabState",
    "ScanResult",
]
