"""
Core module - Authenticated request pipeline.

This package contains the credential store, token lifecycle, rate limiting
and request execution that every platform API call goes through.
"""

from .config import ClientConfig
from .credentials import Credentials, CredentialStore, Token
from .auth import TokenManager
from .rate_limiter import RateLimiter, RateLimitConfig
from .executor import ApiResponse, RequestExecutor, RequestState
from .errors import (
    HawkOpError,
    ConfigurationError,
    NoCredentialsError,
    AuthFailedError,
    TransportError,
    DecodeError,
    PersistError,
    ApiError,
    UnauthorizedError,
    RateLimitedError,
    ClientError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    UnprocessableEntityError,
)


__all__ = [
    # Configuration
    "ClientConfig",
    # Credentials
    "Credentials",
    "CredentialStore",
    "Token",
    "TokenManager",
    # Rate limiting
    "RateLimiter",
    "RateLimitConfig",
    # Request execution
    "ApiResponse",
    "RequestExecutor",
    "RequestState",
    # Exceptions
    "HawkOpError",
    "ConfigurationError",
    "NoCredentialsError",
    "AuthFailedError",
    "TransportError",
    "DecodeError",
    "PersistError",
    "ApiError",
    "UnauthorizedError",
    "RateLimitedError",
    "ClientError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
]
