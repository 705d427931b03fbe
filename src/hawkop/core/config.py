"""
Client configuration - Platform constants and tunables for the API client.
"""

from dataclasses import dataclass
from datetime import timedelta


DEFAULT_BASE_URL = "https://api.stackhawk.com"
AUTH_ENDPOINT = "/api/v1/auth/login"
USER_AGENT = "hawkop-cli"
MAX_PAGE_SIZE = 1000  # Largest page the platform serves


@dataclass
class ClientConfig:
    """Configuration for the platform API client"""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0  # Total transport timeout per request (seconds)
    user_agent: str = USER_AGENT
    requests_per_minute: int = 360  # Platform ceiling
    retry_after_default: float = 60.0  # Wait on 429 without Retry-After (seconds)
    max_page_size: int = MAX_PAGE_SIZE
    token_lifetime: timedelta = timedelta(minutes=30)  # When login omits expires_at

    def __post_init__(self):
        self.base_url = self.base_url.rstrip("/")
