"""
Client-side filters applied to list results before rendering.

The platform endpoints used here take no filter parameters, so role,
status, application, environment and severity filtering happen locally.
All comparisons are case-insensitive.
"""

from typing import List, Optional, Sequence, TypeVar

from .models import AppApplication, ApplicationScanResult, OrganizationMember, ScanAlert


T = TypeVar("T")


def apply_limit(items: Sequence[T], limit: int) -> List[T]:
    """Keep the first `limit` items; 0 or less means no limit"""
    if limit > 0:
        return list(items[:limit])
    return list(items)


def filter_members_by_role(members: Sequence[OrganizationMember], role: Optional[str]) -> List[OrganizationMember]:
    if not role:
        return list(members)
    wanted = role.upper()
    return [member for member in members if member.primary_role.upper() == wanted]


def filter_applications_by_status(applications: Sequence[AppApplication], status: Optional[str]) -> List[AppApplication]:
    if not status:
        return list(applications)
    wanted = status.upper()
    return [app for app in applications if (app.application_status or "").upper() == wanted]


def filter_scans(
    results: Sequence[ApplicationScanResult],
    app: Optional[str] = None,
    env: Optional[str] = None,
    status: Optional[str] = None,
) -> List[ApplicationScanResult]:
    """
    Filter scan results.

    Args:
        results: Scan results to filter
        app: Substring of the application name or ID
        env: Exact environment name
        status: Exact scan status (STARTED, COMPLETED, ERROR, ...)
    """
    filtered = []
    for result in results:
        scan = result.scan
        if app:
            needle = app.lower()
            if needle not in scan.application_name.lower() and needle not in scan.application_id.lower():
                continue
        if env and (scan.env or "").lower() != env.lower():
            continue
        if status and scan.status.lower() != status.lower():
            continue
        filtered.append(result)
    return filtered


def filter_alerts_by_severity(alerts: Sequence[ScanAlert], severity: Optional[str]) -> List[ScanAlert]:
    if not severity:
        return list(alerts)
    return [alert for alert in alerts if alert.severity.lower() == severity.lower()]


def find_scan(results: Sequence[ApplicationScanResult], scan_id: str) -> Optional[ApplicationScanResult]:
    for result in results:
        if result.scan.id == scan_id:
            return result
    return None
