"""
Version information for the HawkOp CLI.
"""

import platform
from typing import Dict

from . import __version__


def get_info() -> Dict[str, str]:
    """Version and runtime details"""
    return {
        "version": __version__,
        "pythonVersion": platform.python_version(),
        "platform": platform.system().lower(),
        "arch": platform.machine(),
    }


def get_detailed_version() -> str:
    info = get_info()
    return (
        f"HawkOp version {info['version']}, "
        f"python {info['pythonVersion']} {info['platform']}/{info['arch']}"
    )
