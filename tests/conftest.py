"""
Shared pytest configuration.

Makes the src layout importable from a plain checkout.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: exercises the client against a local mock platform")
