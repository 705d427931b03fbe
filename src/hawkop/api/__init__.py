"""
Platform API module.

Typed accessors for StackHawk resources, their response models and the
client-side filters used by the CLI.
"""

from .client import PlatformClient
from .models import (
    AlertStats,
    AppApplication,
    Application,
    ApplicationScanResult,
    Number,
    NumberOrText,
    Organization,
    OrganizationMember,
    OrganizationMembership,
    PaginationOptions,
    Scan,
    ScanAlert,
    Team,
    Text,
    User,
    UserExternal,
)


__all__ = [
    # Client
    "PlatformClient",
    # Models
    "AlertStats",
    "AppApplication",
    "Application",
    "ApplicationScanResult",
    "Number",
    "NumberOrText",
    "Organization",
    "OrganizationMember",
    "OrganizationMembership",
    "PaginationOptions",
    "Scan",
    "ScanAlert",
    "Team",
    "Text",
    "User",
    "UserExternal",
]
