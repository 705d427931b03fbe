"""
Token Manager - Bearer token lifecycle for the platform API.

Exchanges the long-lived API key for a short-lived JWT at the login
endpoint, tracks its expiry and persists it through the CredentialStore so
later processes can reuse it.
"""

import asyncio
from datetime import datetime
from typing import Callable, Optional

import aiohttp
import structlog
from pydantic import BaseModel, ValidationError

from .config import AUTH_ENDPOINT, ClientConfig
from .credentials import CredentialStore, Credentials, utcnow
from .errors import AuthFailedError, DecodeError, NoCredentialsError, TransportError


class AuthResponse(BaseModel):
    """Body of a successful login call"""
    token: str
    expires_at: Optional[datetime] = None
    token_type: Optional[str] = None


def describe_validation_error(error: ValidationError) -> str:
    """Summarize failing fields without echoing input values."""
    fields = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "body"
        fields.append(f"{location} ({detail['type']})")
    return ", ".join(fields)


class TokenManager:
    """
    Keeps a usable bearer token in Credentials.

    Example:
        >>> manager = TokenManager(session, credentials, store)
        >>> await manager.ensure_valid_token()
        >>> credentials.token.token
        'eyJ...'
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        credentials: Credentials,
        store: CredentialStore,
        config: Optional[ClientConfig] = None,
        now: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the token manager.

        Args:
            session: HTTP session used for the login call
            credentials: Shared credentials for this client session
            store: Persistence for refreshed tokens
            config: Client configuration (uses defaults if None)
            now: Current UTC time source
        """
        self.session = session
        self.credentials = credentials
        self.store = store
        self.config = config or ClientConfig()
        self.login_count = 0

        self._now = now

        self.logger = structlog.get_logger(__name__)

    async def ensure_valid_token(self):
        """
        Make sure a valid token is cached, logging in if needed.

        Raises:
            NoCredentialsError: If a login is needed but no API key is set
            AuthFailedError: If the platform rejects the API key
            PersistError: If the refreshed token cannot be saved
        """
        if self.credentials.has_valid_token(self._now()):
            return

        if not self.credentials.has_api_key():
            raise NoCredentialsError()

        await self.authenticate()

    def invalidate(self):
        """Drop the cached token after the platform rejected it"""
        self.credentials.clear_token()
        self.logger.info("token_invalidated")

    async def authenticate(self):
        """
        Exchange the API key for a new bearer token.

        The key travels only in the X-ApiKey header. When the platform omits
        expires_at, the token is given the default lifetime from now.
        """
        url = self.config.base_url + AUTH_ENDPOINT
        headers = {
            "X-ApiKey": self.credentials.api_key,
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }

        self.logger.debug("authenticating", url=url)
        self.login_count += 1

        try:
            async with self.session.get(url, headers=headers) as response:
                status = response.status
                body = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"failed to authenticate: {e!r}") from e

        if status != 200:
            self.logger.warning("authentication_failed", status=status)
            raise AuthFailedError(status, body)

        try:
            auth = AuthResponse.model_validate_json(body)
        except ValidationError as e:
            raise DecodeError(
                f"failed to parse auth response: {describe_validation_error(e)}"
            ) from e

        expires_at = auth.expires_at or self._now() + self.config.token_lifetime
        self.credentials.set_token(auth.token, expires_at)

        self.logger.info(
            "token_refreshed",
            expires_at=self.credentials.token.expires_at.isoformat(),
            default_lifetime=auth.expires_at is None,
        )

        self.store.save(self.credentials)
