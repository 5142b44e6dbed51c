"""
Tests for response and transport error classification.
"""

import httpx
import pytest

from opencode_sdk.classifier import (
    MAX_ERROR_BODY_SIZE,
    MAX_MESSAGE_DISPLAY_SIZE,
    classify_response,
    classify_transport_error,
)
from opencode_sdk.exceptions import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    OpencodeError,
    PermissionDeniedError,
    RateLimitError,
    TransportError,
    UnprocessableEntityError,
)


class TestClassifyResponse:
    """Tests for classify_response."""

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_is_not_an_error(self, status):
        assert classify_response(status, b"") is None

    @pytest.mark.parametrize(
        "status,error_cls",
        [
            (400, BadRequestError),
            (401, AuthenticationError),
            (403, PermissionDeniedError),
            (404, NotFoundError),
            (409, ConflictError),
            (422, UnprocessableEntityError),
            (429, RateLimitError),
            (500, InternalServerError),
            (503, InternalServerError),
        ],
    )
    def test_status_maps_to_error_class(self, status, error_cls):
        error = classify_response(status, b'{"error":"nope"}')
        assert isinstance(error, error_cls)
        assert isinstance(error, APIError)
        assert error.status_code == status

    def test_unmapped_4xx_is_plain_api_error(self):
        error = classify_response(418, b"teapot")
        assert type(error) is APIError

    @pytest.mark.parametrize("status", [600, 999])
    def test_status_above_5xx_is_plain_api_error(self, status):
        error = classify_response(status, b"")
        assert type(error) is APIError
        assert error.status_code == status
        assert not error.is_retryable

    def test_redirect_is_an_error(self):
        error = classify_response(302, b"")
        assert isinstance(error, APIError)
        assert error.status_code == 302

    def test_body_kept_verbatim(self):
        error = classify_response(400, b'{"name":"BadRequest","data":{}}')
        assert error.body == '{"name":"BadRequest","data":{}}'
        assert not error.truncated

    def test_empty_body_uses_reason_phrase(self):
        error = classify_response(404, b"")
        assert error.message == "Not Found"

    def test_request_id_header(self):
        error = classify_response(500, b"boom", {"x-request-id": "req_123"})
        assert error.request_id == "req_123"
        assert "req_123" in str(error)

    def test_large_body_truncated(self):
        error = classify_response(500, b"x" * (MAX_ERROR_BODY_SIZE + 10))
        assert error.truncated
        assert len(error.body) == MAX_ERROR_BODY_SIZE
        assert len(error.message) < MAX_MESSAGE_DISPLAY_SIZE + 100

    def test_retryability(self):
        assert classify_response(500, b"").is_retryable
        assert classify_response(599, b"").is_retryable
        assert not classify_response(429, b"").is_retryable
        assert not classify_response(400, b"").is_retryable


class TestClassifyTransportError:
    """Tests for classify_transport_error."""

    def test_timeout_sets_flag(self):
        exc = httpx.ReadTimeout("timed out")
        error = classify_transport_error(exc)
        assert isinstance(error, TransportError)
        assert error.timed_out
        assert error.cause is exc

    def test_connect_error(self):
        exc = httpx.ConnectError("refused")
        error = classify_transport_error(exc)
        assert not error.timed_out
        assert not error.cancelled
        assert error.cause is exc

    def test_is_sdk_error(self):
        assert isinstance(classify_transport_error(httpx.ConnectError("x")), OpencodeError)
