"""
Credentials - API key, default organization and cached bearer token.

The Credentials model is the single source of truth for authentication
state during a session. CredentialStore owns the on-disk JSON file and its
permissions; saves are atomic (temp file + rename) and the file is only
readable by its owner.
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError, PersistError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Token(BaseModel):
    """Short-lived bearer token issued by the login endpoint"""

    token: str = ""
    expires_at: datetime

    @field_validator("expires_at")
    @classmethod
    def _normalize_timezone(cls, value: datetime) -> datetime:
        return _as_utc(value)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = _as_utc(now) if now else utcnow()
        return now >= self.expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return bool(self.token) and not self.is_expired(now)


def token_is_expired(token: Optional[Token], now: Optional[datetime] = None) -> bool:
    """A missing token counts as expired."""
    return token is None or token.is_expired(now)


class Credentials(BaseModel):
    """
    Persisted authentication state.

    Attributes:
        api_key: Long-lived platform API key (empty means unauthenticated)
        org_id: Default organization for org-scoped commands
        token: Cached bearer token, stored under the "jwt" key on disk
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    api_key: str = ""
    org_id: str = ""
    token: Optional[Token] = Field(default=None, alias="jwt")

    def __setattr__(self, name, value):
        # A cached token belongs to the key it was issued for
        if name == "api_key" and value != self.api_key:
            super().__setattr__("token", None)
        super().__setattr__(name, value)

    def set_api_key(self, api_key: str):
        """Replace the API key. Any cached token belongs to the old key."""
        self.api_key = api_key
        self.token = None

    def set_org_id(self, org_id: str):
        self.org_id = org_id

    def set_token(self, value: str, expires_at: datetime):
        self.token = Token(token=value, expires_at=expires_at)

    def clear_token(self):
        self.token = None

    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def has_valid_token(self, now: Optional[datetime] = None) -> bool:
        return self.token is not None and self.token.is_valid(now)

    def to_file_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_defaults=True)


def default_config_path() -> Path:
    return Path.home() / ".config" / "hawkop" / "config.json"


class CredentialStore:
    """
    JSON file persistence for Credentials.

    Example:
        >>> store = CredentialStore()
        >>> credentials = store.load()
        >>> credentials.set_org_id("my-org")
        >>> store.save(credentials)
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            path: Config file location (defaults to ~/.config/hawkop/config.json)
        """
        self.path = Path(path) if path else default_config_path()
        self.logger = structlog.get_logger(__name__)

    def load(self) -> Credentials:
        """
        Read credentials from disk.

        Returns:
            Stored credentials, or empty Credentials when the file is absent

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        if not self.path.exists():
            self.logger.debug("config_file_missing", path=str(self.path))
            return Credentials()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            credentials = Credentials.model_validate(data)
        except OSError as e:
            raise ConfigurationError(f"failed to read config file: {e}") from e
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigurationError(f"failed to parse config file {self.path}: {e}") from e

        self.logger.debug(
            "config_loaded",
            path=str(self.path),
            has_api_key=credentials.has_api_key(),
            has_token=credentials.token is not None,
        )
        return credentials

    def save(self, credentials: Credentials):
        """
        Write credentials atomically with owner-only permissions.

        Raises:
            PersistError: If the directory or file cannot be written
        """
        data = json.dumps(credentials.to_file_dict(), indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".config-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(data)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistError(f"failed to write config file {self.path}: {e}") from e

        self.logger.debug("config_saved", path=str(self.path))
