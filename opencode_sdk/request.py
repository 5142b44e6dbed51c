"""
Opencode SDK - Request descriptions and per-call deadlines.
"""

import json
import string
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import quote

from .encoding import encode_body
from .exceptions import ParamValidationError
from .query import Pair, QuerySettings, encode_query
from .validation import validate_path_param

_formatter = string.Formatter()


def render_path(template: str, path_params: Optional[Mapping[str, Any]] = None) -> str:
    """Substitute ``{name}`` segments, each required and percent-escaped.

    Identifiers are escaped as a single segment, so ``a/b`` or ``../x``
    can never address a different resource.
    """
    path_params = path_params or {}
    values = {}
    for _, name, _, _ in _formatter.parse(template):
        if name is None:
            continue
        value = path_params.get(name)
        validate_path_param(value, name)
        values[name] = quote(str(value), safe="")
    return template.format(**values)


def _serialize(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    try:
        return json.dumps(body, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ParamValidationError("body", f"not JSON serializable: {exc}") from exc


@dataclass(frozen=True)
class RequestSpec:
    """Everything needed to send one logical call. Built once, never mutated.

    ``body`` holds the already-encoded UTF-8 JSON, or ``None`` for calls
    without a body.
    """

    method: str
    path: str
    query: tuple[Pair, ...] = ()
    body: Optional[bytes] = None

    @classmethod
    def build(
        cls,
        method: str,
        path_template: str,
        path_params: Optional[Mapping[str, Any]] = None,
        params: Any = None,
        settings: Optional[QuerySettings] = None,
    ) -> "RequestSpec":
        """Validate and encode everything up front; no I/O happens here."""
        path = render_path(path_template, path_params)
        query = tuple(encode_query(params, settings))
        body = _serialize(encode_body(params))
        return cls(method=method.upper(), path=path, query=query, body=body)

    def decoded_body(self) -> Any:
        """The decoded body, for inspection."""
        return None if self.body is None else json.loads(self.body)

    def headers(self) -> dict[str, str]:
        if self.body is None:
            return {}
        return {"Content-Type": "application/json"}


@dataclass(frozen=True)
class RequestOptions:
    """Per-call overrides.

    ``timeout`` can only tighten the client's deadline. ``cancel_event`` is
    honoured by the synchronous client between attempts and during backoff.
    """

    timeout: Optional[float] = None
    cancel_event: Optional[threading.Event] = None
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")


class Deadline:
    """Absolute point in time by which a whole call must finish."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        self._expires_at = time.monotonic() + timeout

    @classmethod
    def for_call(cls, client_timeout: float, options: Optional[RequestOptions]) -> "Deadline":
        timeout = client_timeout
        if options is not None and options.timeout is not None:
            timeout = min(timeout, options.timeout)
        return cls(timeout)

    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0
