"""
Request Executor - Authenticated, rate-limited requests to the platform API.

Every API call goes through execute(), which:
1. Ensures a valid bearer token (logging in if needed)
2. Waits for the rate limiter before every send, resends included
3. Sends the request
4. Resolves 401 (re-authenticate) and 429 (wait) with a single resend
5. Maps every other non-2xx status to a typed exception

The retry path is a small state machine so that "at most one retry per
request" holds by construction:

    SENDING --401--> RETRYING_401 --any--> DONE
    SENDING --429--> RETRYING_429 --any--> DONE
    SENDING --other--> DONE
"""

import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import aiohttp
import structlog

from .auth import TokenManager
from .config import ClientConfig
from .errors import DecodeError, TransportError, error_for_status
from .rate_limiter import RateLimitConfig, RateLimiter


class RequestState(Enum):
    """Position of a single logical request in the retry state machine"""
    SENDING = "sending"
    RETRYING_401 = "retrying_401"
    RETRYING_429 = "retrying_429"
    DONE = "done"


@dataclass
class ApiResponse:
    """Fully read HTTP response"""
    status: int
    headers: Mapping[str, str]
    body: bytes
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise DecodeError(f"invalid JSON from {self.url}: {e}") from e


def build_query(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop empty values; the platform treats a present-but-empty param as set."""
    if not params:
        return {}
    return {
        key: str(value)
        for key, value in params.items()
        if value is not None and str(value) != ""
    }


def next_state(state: RequestState, status: int) -> RequestState:
    """
    Transition after a response is received.

    Only the first send may lead to a retry; any response to a retry is final.
    """
    if state is RequestState.SENDING:
        if status == 401:
            return RequestState.RETRYING_401
        if status == 429:
            return RequestState.RETRYING_429
    return RequestState.DONE


class RequestExecutor:
    """
    Sends authenticated requests to the platform API.

    Example:
        >>> executor = RequestExecutor(session, token_manager)
        >>> response = await executor.execute("GET", "/api/v1/user")
        >>> response.json()["user"]["stackhawkId"]
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token_manager: TokenManager,
        rate_limiter: Optional[RateLimiter] = None,
        config: Optional[ClientConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the executor.

        Args:
            session: HTTP session shared with the token manager
            token_manager: Source of bearer tokens
            rate_limiter: Request spacing (built from config if None)
            config: Client configuration (uses defaults if None)
            sleep: Coroutine used for the 429 backoff wait
        """
        self.session = session
        self.token_manager = token_manager
        self.config = config or ClientConfig()
        self.rate_limiter = rate_limiter or RateLimiter(
            RateLimitConfig(requests_per_minute=self.config.requests_per_minute)
        )
        self._sleep = sleep

        self.logger = structlog.get_logger(__name__)

    async def execute(
        self,
        method: str,
        endpoint: str,
        body: Optional[Any] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse:
        """
        Send a request, resolving 401 and 429 with at most one resend.

        Args:
            method: HTTP method
            endpoint: Path below the base URL, e.g. "/api/v1/user"
            body: JSON-serializable request body
            params: Query parameters; empty values are omitted

        Returns:
            The 2xx response

        Raises:
            NoCredentialsError, AuthFailedError, PersistError: From the token manager
            TransportError: On network failure of any send
            ApiError: For terminal non-2xx responses (ClientError for 4xx)
        """
        await self.token_manager.ensure_valid_token()

        url = self.config.base_url + endpoint
        query = build_query(params)
        payload = json.dumps(body).encode("utf-8") if body is not None else None

        state = RequestState.SENDING
        while True:
            # Resends are outbound requests too and count toward the spacing
            await self.rate_limiter.throttle()
            response = await self._send(method, url, query, payload)
            state = next_state(state, response.status)

            if state is RequestState.DONE:
                break
            if state is RequestState.RETRYING_401:
                await self._reauthenticate(url)
            else:
                await self._backoff(url, response)

        if response.ok:
            return response

        self.logger.debug("request_failed", method=method, url=url, status=response.status)
        raise error_for_status(response.status, response.text)

    async def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return await self.execute("GET", endpoint, params=params)

    async def _send(
        self,
        method: str,
        url: str,
        query: Dict[str, str],
        payload: Optional[bytes],
    ) -> ApiResponse:
        # Headers are rebuilt per send so a retry carries the refreshed token
        token = self.token_manager.credentials.token
        headers = {
            "Authorization": f"Bearer {token.token if token else ''}",
            "Content-Type": "application/json",
            "User-Agent": self.config.user_agent,
        }

        try:
            async with self.session.request(
                method, url, params=query, data=payload, headers=headers
            ) as response:
                result = ApiResponse(
                    status=response.status,
                    headers=response.headers.copy(),
                    body=await response.read(),
                    url=url,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"request failed: {method} {url}: {e!r}") from e

        self.logger.debug("request_sent", method=method, url=url, status=result.status)
        return result

    async def _reauthenticate(self, url: str):
        self.logger.warning("unauthorized_retry", url=url)
        self.token_manager.invalidate()
        await self.token_manager.ensure_valid_token()

    async def _backoff(self, url: str, response: ApiResponse):
        wait = self.retry_after(response)
        self.logger.warning("rate_limited_retry", url=url, wait=f"{wait:.0f}s")
        await self._sleep(wait)

    def retry_after(self, response: ApiResponse) -> float:
        """Seconds to wait from an integer Retry-After header, else the default."""
        header = response.headers.get("Retry-After")
        if header:
            try:
                return float(max(0, int(header.strip())))
            except ValueError:
                pass
        return self.config.retry_after_default
