"""
Opencode SDK - Typed errors surfaced by every client call.

Exactly one of these describes a failed call: a local parameter problem, a
transport failure, a non-success HTTP status, or an undecodable body.
"""

from typing import Any, Optional


class OpencodeError(Exception):
    """Base exception for all Opencode SDK errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParamValidationError(OpencodeError):
    """Raised when caller-supplied parameters violate a required/shape contract.

    Never sent over the wire.
    """

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"invalid parameter {field!r}: {reason}")
        self.field = field
        self.reason = reason


class TransportError(OpencodeError):
    """Raised when no HTTP response was obtained."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        timed_out: bool = False,
        cancelled: bool = False,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.timed_out = timed_out
        self.cancelled = cancelled


class APIError(OpencodeError):
    """Raised when the server answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        request_id: Optional[str] = None,
        truncated: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.request_id = request_id
        self.truncated = truncated

    @property
    def is_retryable(self) -> bool:
        return 500 <= self.status_code <= 599

    def __str__(self) -> str:
        if self.request_id:
            return f"{self.message} (status {self.status_code}, request {self.request_id})"
        return f"{self.message} (status {self.status_code})"


class BadRequestError(APIError):
    """Raised for 400 Bad Request."""

    pass


class AuthenticationError(APIError):
    """Raised when authentication fails or the API key is invalid."""

    pass


class PermissionDeniedError(APIError):
    """Raised for 403 Forbidden."""

    pass


class NotFoundError(APIError):
    """Raised when a requested resource is not found."""

    pass


class ConflictError(APIError):
    """Raised for 409 Conflict."""

    pass


class UnprocessableEntityError(APIError):
    """Raised for 422 Unprocessable Entity."""

    pass


class RateLimitError(APIError):
    """Raised for 429 Too Many Requests. Not retried by the client."""

    pass


class InternalServerError(APIError):
    """Raised for any 5xx status once retries are exhausted."""

    pass


class DecodeError(OpencodeError):
    """Raised when a successful response body does not match the requested shape."""

    def __init__(
        self,
        message: str,
        raw_body: Any = None,
        cause: Optional[BaseException] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.raw_body = raw_body
        self.cause = cause
        self.field = field
