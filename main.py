#!/usr/bin/env python3
"""
PORTPROBE - Adaptive TCP Banner Grabber

Entry point for running from a source checkout.

Usage:
    cat hosts.txt | python main.py scan --top-ports
    echo example.com | python main.py scan --pr 20-25 -t 3
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from portprobe.cli import cli


if __name__ == '__main__':
    cli()
