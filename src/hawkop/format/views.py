"""
Resource views - One table layout per platform resource.
"""

from typing import Optional, Sequence

from rich.table import Table

from ..api.models import (
    AppApplication,
    ApplicationScanResult,
    Organization,
    OrganizationMember,
    ScanAlert,
    Team,
)
from .table import build_table, format_number_or_text, format_timestamp, or_na


def organizations_table(organizations: Sequence[Organization]) -> Table:
    table = build_table("ID", "NAME", "PLAN", "CREATED")
    for org in organizations:
        table.add_row(org.id, org.name, or_na(org.plan), format_timestamp(org.created_timestamp))
    return table


def members_table(members: Sequence[OrganizationMember]) -> Table:
    table = build_table("NAME", "EMAIL", "ROLE", "PROVIDER", "CREATED")
    for member in members:
        name = member.external.display_name if member.external else ""
        email = member.external.email if member.external else ""
        provider = member.provider.slug if member.provider else ""
        table.add_row(
            or_na(name),
            or_na(email),
            or_na(member.primary_role),
            or_na(provider),
            format_timestamp(member.created_timestamp),
        )
    return table


def teams_table(teams: Sequence[Team]) -> Table:
    table = build_table("ID", "NAME", "USERS", "APPS", "CREATED")
    for team in teams:
        table.add_row(
            team.id,
            or_na(team.name),
            str(len(team.users)),
            str(len(team.applications)),
            format_timestamp(team.created_timestamp),
        )
    return table


def applications_table(applications: Sequence[AppApplication]) -> Table:
    table = build_table("ID", "NAME", "ENV", "STATUS", "TYPE")
    for app in applications:
        table.add_row(
            app.application_id,
            or_na(app.name),
            or_na(app.env),
            or_na(app.application_status),
            or_na(app.application_type),
        )
    return table


def scans_table(results: Sequence[ApplicationScanResult]) -> Table:
    table = build_table("SCAN ID", "APPLICATION", "ENV", "STATUS", "DURATION", "ALERTS", "TIMESTAMP")
    for result in results:
        scan = result.scan
        alerts = str(result.alert_stats.total) if result.alert_stats else ""
        table.add_row(
            scan.id,
            or_na(scan.application_name),
            or_na(scan.env),
            or_na(scan.status),
            format_number_or_text(result.scan_duration, suffix="s"),
            alerts,
            format_timestamp(scan.timestamp, "%Y-%m-%d %H:%M"),
        )
    return table


def scan_overview_table(result: ApplicationScanResult) -> Table:
    scan = result.scan
    table = build_table("FIELD", "VALUE")
    table.add_row("Scan ID", scan.id)
    table.add_row("Application", scan.application_name)
    table.add_row("Environment", scan.env or "")
    table.add_row("Status", scan.status)
    if result.scan_duration is not None:
        table.add_row("Duration", format_number_or_text(result.scan_duration, suffix="s"))
    if result.url_count is not None:
        table.add_row("URLs Scanned", format_number_or_text(result.url_count))
    if result.policy_name:
        table.add_row("Policy", result.policy_name)
    timestamp = format_timestamp(scan.timestamp, "%Y-%m-%d %H:%M:%S")
    if timestamp:
        table.add_row("Timestamp", timestamp)
    return table


def scan_stats_table(result: ApplicationScanResult) -> Optional[Table]:
    """Alert counts by severity, or None when the scan has no stats."""
    stats = result.alert_stats
    if stats is None:
        return None
    table = build_table("SEVERITY", "COUNT")
    table.add_row("High", str(stats.high))
    table.add_row("Medium", str(stats.medium))
    table.add_row("Low", str(stats.low))
    table.add_row("Info", str(stats.info))
    table.add_row("Total", str(stats.total))
    return table


def alerts_table(alerts: Sequence[ScanAlert]) -> Table:
    table = build_table("PLUGIN ID", "NAME", "SEVERITY", "URIS", "CWE")
    for alert in alerts:
        table.add_row(
            alert.plugin_id,
            or_na(alert.name),
            or_na(alert.severity),
            str(max(alert.uri_count, 0)),
            or_na(alert.cwe_id),
        )
    return table
