"""
Opencode SDK - Retry decisions for a single logical call.

Everything here is a pure function of the attempt and the client config;
there are no counters shared between calls.
"""

import random
from dataclasses import dataclass
from typing import Optional

from .config import ClientConfig
from .exceptions import APIError, OpencodeError, TransportError

# Fraction of the backoff delay that jitter may remove.
JITTER_RATIO = 0.25


@dataclass(frozen=True)
class Attempt:
    """One execution of a request within a call."""

    number: int
    backoff: float = 0.0
    status_code: Optional[int] = None
    content: bytes = b""
    error: Optional[OpencodeError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay: float = 0.0

    @classmethod
    def none(cls) -> "RetryDecision":
        return cls(retry=False)

    @classmethod
    def after(cls, delay: float) -> "RetryDecision":
        return cls(retry=True, delay=delay)


def is_retryable(error: Optional[OpencodeError]) -> bool:
    """Transport failures and 5xx responses are retryable; nothing else is."""
    if isinstance(error, TransportError):
        return not error.cancelled
    if isinstance(error, APIError):
        return error.is_retryable
    return False


def backoff_delay(
    number: int,
    config: ClientConfig,
    rng: Optional[random.Random] = None,
) -> float:
    """Delay before the attempt following attempt ``number``.

    Doubles from ``config.initial_backoff`` per attempt, capped at
    ``config.max_backoff``, then reduced by up to ``JITTER_RATIO``.
    """
    delay = min(config.initial_backoff * (2 ** number), config.max_backoff)
    jitter = (rng or random).uniform(0.0, JITTER_RATIO)
    return delay * (1.0 - jitter)


def should_retry(
    attempt: Attempt,
    config: ClientConfig,
    rng: Optional[random.Random] = None,
) -> RetryDecision:
    if attempt.succeeded or not is_retryable(attempt.error):
        return RetryDecision.none()
    if attempt.number >= config.max_retries:
        return RetryDecision.none()
    return RetryDecision.after(backoff_delay(attempt.number, config, rng))
