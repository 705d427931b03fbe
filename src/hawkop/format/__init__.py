"""
Output formatting module.

Rich table layouts for each resource plus JSON serialization.
"""

from .table import build_table, format_number_or_text, format_timestamp, or_na, to_json
from .views import (
    alerts_table,
    applications_table,
    members_table,
    organizations_table,
    scan_overview_table,
    scan_stats_table,
    scans_table,
    teams_table,
)


__all__ = [
    # Helpers
    "build_table",
    "format_number_or_text",
    "format_timestamp",
    "or_na",
    "to_json",
    # Views
    "alerts_table",
    "applications_table",
    "members_table",
    "organizations_table",
    "scan_overview_table",
    "scan_stats_table",
    "scans_table",
    "teams_table",
]
