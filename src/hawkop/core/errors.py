"""
Errors - Exception taxonomy for the HawkOp request pipeline.

Every failure the pipeline can surface maps to exactly one class below.
401 and 429 are resolved inside the RequestExecutor; everything else
propagates to the caller unchanged.
"""

from typing import Optional


class HawkOpError(Exception):
    """Base exception for all HawkOp errors"""
    pass


class ConfigurationError(HawkOpError):
    """Raised when the credential file exists but cannot be read or parsed"""
    pass


class NoCredentialsError(HawkOpError):
    """Raised when no API key is configured"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "no API key configured - run 'hawkop init' to set up credentials"
        )


class AuthFailedError(HawkOpError):
    """Raised when the login endpoint rejects the API key"""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"authentication failed: HTTP {status} - {body}")


class TransportError(HawkOpError):
    """Raised on network-level failures (DNS, connection, timeout)"""
    pass


class DecodeError(HawkOpError):
    """Raised when a response body does not match the expected shape"""
    pass


class PersistError(HawkOpError):
    """Raised when the credential file cannot be written"""
    pass


class ApiError(HawkOpError):
    """
    Generic non-2xx response from the platform.

    Attributes:
        status: HTTP status code
        body: Raw response body, kept for diagnostics
    """

    label = "API error"

    def __init__(self, status: int, body: str, message: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message or f"{self.label}: HTTP {status} - {body}")


class UnauthorizedError(ApiError):
    """Raised when a request is still unauthorized after re-authentication"""

    label = "unauthorized"

    def __init__(self, status: int, body: str):
        super().__init__(
            status, body, f"unauthorized ({status}): token rejected after re-authentication - {body}"
        )


class RateLimitedError(ApiError):
    """Raised when a request is still rate limited after the backoff wait"""

    label = "rate limited"

    def __init__(self, status: int, body: str):
        super().__init__(
            status, body, f"rate limited ({status}): request rejected after backoff - {body}"
        )


class ClientError(ApiError):
    """Terminal 4xx response (400/403/404/409/422)"""

    label = "client error"
    detail = ""

    def __init__(self, status: int, body: str):
        detail = f"{self.detail} - " if self.detail else ""
        super().__init__(status, body, f"{self.label} ({status}): {detail}{body}")


class BadRequestError(ClientError):
    label = "bad request"


class ForbiddenError(ClientError):
    label = "forbidden"
    detail = "insufficient permissions"


class NotFoundError(ClientError):
    label = "not found"
    detail = "resource does not exist"


class ConflictError(ClientError):
    label = "conflict"
    detail = "resource cannot be modified"


class UnprocessableEntityError(ClientError):
    label = "unprocessable entity"
    detail = "invalid input"


CLIENT_ERRORS = {
    400: BadRequestError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
}


def error_for_status(status: int, body: str) -> ApiError:
    """
    Map a terminal non-2xx status to its exception.

    Args:
        status: HTTP status code
        body: Raw response body

    Returns:
        The exception instance to raise
    """
    if status == 401:
        return UnauthorizedError(status, body)
    if status == 429:
        return RateLimitedError(status, body)
    error_class = CLIENT_ERRORS.get(status)
    if error_class is not None:
        return error_class(status, body)
    return ApiError(status, body)
