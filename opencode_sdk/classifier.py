"""
Opencode SDK - Maps the outcome of one HTTP exchange to a typed error.
"""

from http import HTTPStatus
from typing import Mapping, Optional

import httpx

from .exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    TransportError,
    UnprocessableEntityError,
)

MAX_ERROR_BODY_SIZE = 1 << 20
MAX_MESSAGE_DISPLAY_SIZE = 4096

_STATUS_ERRORS: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
}


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


def api_error_for(
    status_code: int,
    content: bytes,
    headers: Optional[Mapping[str, str]] = None,
) -> APIError:
    """Build the APIError for a non-success response, keeping the body raw."""
    truncated = len(content) > MAX_ERROR_BODY_SIZE
    if truncated:
        content = content[:MAX_ERROR_BODY_SIZE]
    body = content.decode("utf-8", errors="replace")

    message = body or _reason_phrase(status_code)
    if len(message) > MAX_MESSAGE_DISPLAY_SIZE:
        message = message[:MAX_MESSAGE_DISPLAY_SIZE] + "... (truncated)"

    if 500 <= status_code <= 599:
        error_cls: type[APIError] = InternalServerError
    else:
        error_cls = _STATUS_ERRORS.get(status_code, APIError)

    return error_cls(
        message,
        status_code=status_code,
        body=body,
        request_id=(headers or {}).get("x-request-id"),
        truncated=truncated,
    )


def classify_response(
    status_code: int,
    content: bytes,
    headers: Optional[Mapping[str, str]] = None,
) -> Optional[APIError]:
    """Return ``None`` for 2xx, otherwise the APIError for the status.

    3xx responses are errors too: redirects are not followed at this layer.
    """
    if 200 <= status_code <= 299:
        return None
    return api_error_for(status_code, content, headers)


def classify_transport_error(exc: Exception) -> TransportError:
    """Wrap a failure that happened before a status line was received."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(f"request timed out: {exc}", cause=exc, timed_out=True)
    return TransportError(f"request failed: {exc}", cause=exc)
