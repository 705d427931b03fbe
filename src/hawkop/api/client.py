"""
Platform Client - Typed accessors for StackHawk platform resources.

Each accessor builds the endpoint path, adds the standard pagination
parameters, runs the request through the RequestExecutor and decodes the
JSON envelope into models.

Usage:
    async with PlatformClient(credentials, store) as client:
        teams = await client.list_organization_teams(org_id)
"""

from typing import Dict, List, Optional, Type, TypeVar

import aiohttp
import structlog
from pydantic import BaseModel, ValidationError

from ..core.auth import TokenManager, describe_validation_error
from ..core.config import ClientConfig
from ..core.credentials import CredentialStore, Credentials
from ..core.errors import DecodeError
from ..core.executor import ApiResponse, RequestExecutor
from ..core.rate_limiter import RateLimitConfig, RateLimiter
from .models import (
    AppApplication,
    ApplicationScanResult,
    Organization,
    OrganizationApplicationsResponse,
    OrganizationMember,
    OrganizationMembersResponse,
    OrganizationScansResponse,
    OrganizationTeamsResponse,
    PaginationOptions,
    ScanAlert,
    ScanAlertsResponse,
    Team,
    User,
    UserResponse,
)


ModelT = TypeVar("ModelT", bound=BaseModel)


class PlatformClient:
    """
    StackHawk platform API client.

    One client owns one HTTP session, one token manager and one rate
    limiter. All calls are awaited one at a time.

    Example:
        >>> async with PlatformClient(credentials, store) as client:
        ...     orgs = await client.list_organizations()
    """

    def __init__(
        self,
        credentials: Credentials,
        store: CredentialStore,
        config: Optional[ClientConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        executor_options: Optional[Dict] = None,
    ):
        """
        Initialize the client.

        Args:
            credentials: Authentication state for this session
            store: Persistence for refreshed tokens
            config: Client configuration (uses defaults if None)
            rate_limiter: Request spacing (built from config if None)
            executor_options: Extra keyword arguments for RequestExecutor
        """
        self.credentials = credentials
        self.store = store
        self.config = config or ClientConfig()
        self.rate_limiter = rate_limiter or RateLimiter(
            RateLimitConfig(requests_per_minute=self.config.requests_per_minute)
        )
        self.executor_options = executor_options or {}

        self.session: Optional[aiohttp.ClientSession] = None
        self.token_manager: Optional[TokenManager] = None
        self.executor: Optional[RequestExecutor] = None

        self.logger = structlog.get_logger(__name__)

    async def __aenter__(self) -> "PlatformClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def open(self):
        """Create the HTTP session and wire the request pipeline"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.config.timeout)
        )
        self.token_manager = TokenManager(
            self.session, self.credentials, self.store, self.config
        )
        self.executor = RequestExecutor(
            self.session,
            self.token_manager,
            rate_limiter=self.rate_limiter,
            config=self.config,
            **self.executor_options,
        )
        self.logger.debug("client_opened", base_url=self.config.base_url)

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None

    def build_standard_params(self, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Standard list parameters: the maximum page size plus any overrides.

        Empty override values are ignored.
        """
        params = {"pageSize": str(self.config.max_page_size)}
        for key, value in (overrides or {}).items():
            if value:
                params[key] = value
        return params

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    async def get_user(self) -> User:
        """Current user, including organization memberships"""
        response = await self._get("/api/v1/user")
        return self._decode(response, UserResponse).user

    async def list_organizations(self) -> List[Organization]:
        """
        Organizations the current user belongs to.

        One entry per membership, in profile order, duplicates kept.
        """
        user = await self.get_user()
        return [membership.organization for membership in user.external.organizations]

    async def list_organization_members(self, org_id: str) -> List[OrganizationMember]:
        response = await self._get(
            f"/api/v1/org/{org_id}/members", self.build_standard_params()
        )
        return self._decode(response, OrganizationMembersResponse).users

    async def list_organization_teams(self, org_id: str) -> List[Team]:
        response = await self._get(
            f"/api/v1/org/{org_id}/teams", self.build_standard_params()
        )
        return self._decode(response, OrganizationTeamsResponse).teams

    async def list_organization_applications(self, org_id: str) -> List[AppApplication]:
        response = await self._get(
            f"/api/v2/org/{org_id}/apps", self.build_standard_params()
        )
        return self._decode(response, OrganizationApplicationsResponse).applications

    async def list_organization_scans(
        self,
        org_id: str,
        options: Optional[PaginationOptions] = None,
    ) -> List[ApplicationScanResult]:
        """
        Scans for every application in an organization.

        Args:
            org_id: Organization ID
            options: Page size, page token and sort overrides

        Returns:
            One page of scan results
        """
        overrides = options.to_params() if options else None
        if overrides and "pageSize" in overrides:
            overrides["pageSize"] = str(
                min(int(overrides["pageSize"]), self.config.max_page_size)
            )
        response = await self._get(
            f"/api/v1/scan/{org_id}", self.build_standard_params(overrides)
        )
        return self._decode(response, OrganizationScansResponse).application_scan_results

    async def get_scan_alerts(self, scan_id: str) -> List[ScanAlert]:
        """
        Alerts for one scan, flattened across applications.

        Platform order is kept within and across applications.
        """
        response = await self._get(f"/api/v1/scan/{scan_id}/alerts")
        envelope = self._decode(response, ScanAlertsResponse)

        alerts: List[ScanAlert] = []
        for result in envelope.application_scan_results:
            alerts.extend(result.application_alerts)
        return alerts

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> ApiResponse:
        if self.executor is None:
            raise RuntimeError("PlatformClient is not open; use 'async with PlatformClient(...)'")
        return await self.executor.get(endpoint, params)

    @staticmethod
    def _decode(response: ApiResponse, model: Type[ModelT]) -> ModelT:
        """
        Decode a JSON envelope.

        Raises:
            DecodeError: If the body is not JSON or does not match the model
        """
        payload = response.json()
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"failed to parse {model.__name__} from {response.url}: "
                f"{describe_validation_error(e)}"
            ) from e
