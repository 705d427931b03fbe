"""
Platform models - Typed views of StackHawk API responses.

Only the fields the CLI reads or renders are modelled; unknown fields are
ignored. List responses arrive wrapped in an envelope object whose payload
sits under a named field ("users", "teams", ...).
"""

import math
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from ..core.config import MAX_PAGE_SIZE


class Number(BaseModel):
    """Numeric value of a loosely typed field"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: float


class Text(BaseModel):
    """Non-numeric value of a loosely typed field"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    value: str


def normalize_number_or_text(raw: Any) -> Any:
    """
    Normalize a field the platform sends as a number or a numeric string.

    Numbers and strings that parse as finite numbers become Number; any
    other value becomes Text.
    """
    if raw is None or isinstance(raw, (Number, Text)):
        return raw
    if isinstance(raw, bool):
        return Text(value=str(raw).lower())
    if isinstance(raw, (int, float)):
        return Number(value=float(raw))
    if isinstance(raw, str):
        try:
            parsed = float(raw)
        except ValueError:
            return Text(value=raw)
        if math.isfinite(parsed):
            return Number(value=parsed)
        return Text(value=raw)
    return Text(value=str(raw))


def _serialize_number_or_text(value: Union[Number, Text]) -> Union[int, float, str]:
    if isinstance(value, Number):
        return int(value.value) if value.value.is_integer() else value.value
    return value.value


NumberOrText = Annotated[
    Union[Number, Text],
    BeforeValidator(normalize_number_or_text),
    PlainSerializer(_serialize_number_or_text),
]


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


class PlatformModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_dict(self) -> dict:
        """Wire-format dict for JSON output"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ----------------------------------------------------------------------
# Organizations and users
# ----------------------------------------------------------------------

class Subscription(PlatformModel):
    status: Optional[str] = None


class Organization(PlatformModel):
    id: str = ""
    name: str = ""
    plan: Optional[str] = None
    created_timestamp: Optional[str] = None
    features: Optional[List[str]] = None
    subscription: Optional[Subscription] = None


class OrganizationMembership(PlatformModel):
    organization: Organization = Field(default_factory=Organization)
    role: str = ""


class UserExternal(PlatformModel):
    id: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    avatar_url: str = ""
    organizations: Annotated[List[OrganizationMembership], BeforeValidator(_none_as_empty)] = []

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return f"{self.first_name} {self.last_name}".strip()


class User(PlatformModel):
    stackhawk_id: str = ""
    external: UserExternal = Field(default_factory=UserExternal)


class UserResponse(PlatformModel):
    user: User


class Provider(PlatformModel):
    slug: str = ""
    client_id: str = ""
    created: str = ""


class Feature(PlatformModel):
    name: str = ""
    enabled: bool = False


class OrganizationMember(PlatformModel):
    stackhawk_id: str = ""
    provider: Optional[Provider] = None
    external: Optional[UserExternal] = None
    created_timestamp: Optional[str] = None
    organization: Optional[Organization] = None
    role: str = ""
    features: Optional[List[Feature]] = None

    @property
    def primary_role(self) -> str:
        """Role in the first listed organization (the one that was queried)."""
        if self.external and self.external.organizations:
            return self.external.organizations[0].role
        return ""


class OrganizationMembersResponse(PlatformModel):
    users: Annotated[List[OrganizationMember], BeforeValidator(_none_as_empty)] = []
    next_page_token: Optional[str] = None
    total_count: Optional[str] = None


# ----------------------------------------------------------------------
# Teams and applications
# ----------------------------------------------------------------------

class Application(PlatformModel):
    id: str = ""
    name: Optional[str] = None


class Team(PlatformModel):
    id: str = ""
    name: str = ""
    organization_id: Optional[str] = None
    applications: Annotated[List[Application], BeforeValidator(_none_as_empty)] = []
    users: Annotated[List[OrganizationMember], BeforeValidator(_none_as_empty)] = []
    created_timestamp: Optional[str] = None


class OrganizationTeamsResponse(PlatformModel):
    teams: Annotated[List[Team], BeforeValidator(_none_as_empty)] = []
    next_page_token: Optional[str] = None
    total_count: Optional[str] = None


class AppApplication(PlatformModel):
    application_id: str = ""
    name: str = ""
    env: Optional[str] = None
    env_id: Optional[str] = None
    application_status: Optional[str] = None
    organization_id: Optional[str] = None
    application_type: Optional[str] = None
    cloud_scan_target: Optional[Any] = None


class OrganizationApplicationsResponse(PlatformModel):
    applications: Annotated[List[AppApplication], BeforeValidator(_none_as_empty)] = []
    total_count: Optional[str] = None
    has_next: bool = False
    next_page_token: Optional[str] = None


# ----------------------------------------------------------------------
# Scans and alerts
# ----------------------------------------------------------------------

class Scan(PlatformModel):
    id: str = ""
    application_id: str = ""
    application_name: str = ""
    env: Optional[str] = None
    status: str = ""
    timestamp: str = ""


class AlertStats(PlatformModel):
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    total: int = 0


class ApplicationScanResult(PlatformModel):
    scan: Scan = Field(default_factory=Scan)
    scan_duration: Optional[NumberOrText] = None
    url_count: Optional[NumberOrText] = None
    alert_stats: Optional[AlertStats] = None
    app_host: Optional[str] = None
    timestamp: Optional[str] = None
    policy_name: Optional[str] = None
    tags: Optional[Any] = None
    metadata: Optional[Any] = None


class OrganizationScansResponse(PlatformModel):
    application_scan_results: Annotated[
        List[ApplicationScanResult], BeforeValidator(_none_as_empty)
    ] = []
    next_page_token: Optional[str] = None
    total_count: Optional[str] = None


class ScanAlert(PlatformModel):
    plugin_id: str = ""
    name: str = ""
    description: str = ""
    severity: str = ""
    references: Optional[List[str]] = None
    uri_count: int = 0
    cwe_id: Optional[str] = None


class ApplicationAlerts(PlatformModel):
    application_alerts: Annotated[List[ScanAlert], BeforeValidator(_none_as_empty)] = []


class ScanAlertsResponse(PlatformModel):
    application_scan_results: Annotated[
        List[ApplicationAlerts], BeforeValidator(_none_as_empty)
    ] = []
    next_page_token: Optional[str] = None


# ----------------------------------------------------------------------
# Pagination
# ----------------------------------------------------------------------

class PaginationOptions(BaseModel):
    """
    Pagination and sorting for list endpoints.

    page_size is clamped to the platform maximum; zero or negative means
    "use the maximum". Empty optional fields are not sent.
    """

    page_size: int = MAX_PAGE_SIZE
    page_token: Optional[str] = None
    page: Optional[str] = None
    sort_field: Optional[str] = None
    sort_dir: Optional[str] = None

    @field_validator("page_size")
    @classmethod
    def _clamp_page_size(cls, value: int) -> int:
        if value <= 0 or value > MAX_PAGE_SIZE:
            return MAX_PAGE_SIZE
        return value

    def to_params(self) -> dict:
        params = {
            "pageSize": str(self.page_size),
            "pageToken": self.page_token,
            "page": self.page,
            "sortField": self.sort_field,
            "sortDir": self.sort_dir,
        }
        return {key: value for key, value in params.items() if value}
