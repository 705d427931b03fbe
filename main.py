#!/usr/bin/env python3
"""
HawkOp - StackHawk CLI companion

Main entry point when running from a source checkout.

Usage:
    python main.py init
    python main.py scan list --app billing --limit 10
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from hawkop.cli import cli


if __name__ == '__main__':
    cli()
