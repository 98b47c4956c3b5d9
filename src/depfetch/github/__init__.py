"""GitHub REST client and upstream error hierarchy."""

from .client import GitHubClient, token_from_credentials
from .errors import (
    RATE_LIMITED_ERRORS,
    AbuseDetected,
    BadGateway,
    ClientError,
    Forbidden,
    NotFound,
    ServerError,
    TooManyRequests,
    Unauthorized,
    UpstreamError,
    error_for_response,
    raise_for_response,
)

__all__ = [
    "RATE_LIMITED_ERRORS",
    "AbuseDetected",
    "BadGateway",
    "ClientError",
    "Forbidden",
    "GitHubClient",
    "NotFound",
    "ServerError",
    "TooManyRequests",
    "Unauthorized",
    "UpstreamError",
    "error_for_response",
    "raise_for_response",
    "token_from_credentials",
]
