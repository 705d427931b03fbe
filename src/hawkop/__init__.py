"""
HawkOp - StackHawk CLI companion

A command-line companion for the StackHawk dynamic application security
testing (DAST) platform. Lists organizations, users, teams, applications,
scans and scan alerts straight from the terminal.

Copyright (c) 2025
Licensed under MIT License
"""

__version__ = "1.0.0"
__author__ = "HawkOp Team"
__status__ = "Development"
