"""
Client configuration for the Opencode SDK.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from . import __version__

DEFAULT_BASE_URL = "http://localhost:54321"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 2
MAX_RETRY_CAP = 10
INITIAL_BACKOFF = 0.5
MAX_BACKOFF = 8.0


def _normalize_base_url(raw_url: str) -> str:
    parsed = urlparse(raw_url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"base URL must use http or https scheme, got {parsed.scheme!r}")
    if not parsed.netloc:
        raise ValueError(f"base URL has no host: {raw_url!r}")
    if not raw_url.endswith("/"):
        raw_url += "/"
    return raw_url


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration shared by every call a client makes."""

    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = field(default=None, repr=False)
    headers: Mapping[str, str] = field(default_factory=dict)
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_backoff: float = INITIAL_BACKOFF
    max_backoff: float = MAX_BACKOFF
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = f"Opencode/Python {__version__}"

    def __post_init__(self):
        object.__setattr__(self, "base_url", _normalize_base_url(self.base_url))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ValueError("max_retries must be an integer")
        if self.max_retries < 0:
            raise ValueError("max retries cannot be negative")
        if self.max_retries > MAX_RETRY_CAP:
            raise ValueError(f"max retries cannot exceed {MAX_RETRY_CAP}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.initial_backoff < 0 or self.max_backoff < 0:
            raise ValueError("backoff delays cannot be negative")
        if self.max_backoff < self.initial_backoff:
            raise ValueError("max_backoff must be at least initial_backoff")

    def default_headers(self) -> dict[str, str]:
        """Headers attached to every request."""
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        headers.update(self.headers)
        return headers

    def with_options(self, **changes: Any) -> "ClientConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Create configuration from environment variables."""
        values: dict[str, Any] = {
            "base_url": os.environ.get("OPENCODE_BASE_URL") or DEFAULT_BASE_URL,
            "api_key": os.environ.get("OPENCODE_API_KEY") or None,
        }
        if os.environ.get("OPENCODE_MAX_RETRIES"):
            values["max_retries"] = int(os.environ["OPENCODE_MAX_RETRIES"])
        if os.environ.get("OPENCODE_TIMEOUT"):
            values["timeout"] = float(os.environ["OPENCODE_TIMEOUT"])
        values.update(overrides)
        return cls(**values)
