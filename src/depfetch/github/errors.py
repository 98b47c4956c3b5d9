"""Upstream HTTP errors raised by the GitHub client."""

from __future__ import annotations

from collections.abc import Mapping

import httpx


class UpstreamError(Exception):
    """An error response from the hosting provider."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_headers = httpx.Headers(response_headers or {})


class ClientError(UpstreamError):
    pass


class Unauthorized(ClientError):
    pass


class Forbidden(ClientError):
    pass


class NotFound(ClientError):
    pass


class TooManyRequests(ClientError):
    pass


class AbuseDetected(ClientError):
    pass


class ServerError(UpstreamError):
    pass


class BadGateway(ServerError):
    pass


RATE_LIMITED_ERRORS: tuple[type[UpstreamError], ...] = (TooManyRequests, AbuseDetected)


def error_for_response(response: httpx.Response) -> UpstreamError | None:
    """Map an error response onto the upstream error hierarchy; None for success."""
    status = response.status_code
    if status < 400:
        return None

    message = _error_message(response)
    error_class = _error_class(status, message)
    return error_class(
        f"{response.request.method} {response.request.url}: {status} - {message}",
        status_code=status,
        response_headers=response.headers,
    )


def raise_for_response(response: httpx.Response) -> None:
    if (error := error_for_response(response)) is not None:
        raise error


def _error_class(status: int, message: str) -> type[UpstreamError]:
    lowered = message.lower()
    match status:
        case 401:
            return Unauthorized
        case 403 if "rate limit exceeded" in lowered and "secondary" not in lowered:
            return TooManyRequests
        case 403 if "abuse" in lowered or "secondary rate limit" in lowered:
            return AbuseDetected
        case 403:
            return Forbidden
        case 404:
            return NotFound
        case 429:
            return TooManyRequests
        case 502:
            return BadGateway
        case _ if status >= 500:
            return ServerError
        case _:
            return ClientError


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase
