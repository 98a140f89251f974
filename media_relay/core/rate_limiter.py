"""Backoff helpers for rate-limited calls."""

from __future__ import annotations

import random
from dataclasses import dataclass

_MAX_EXPONENT = 5
_JITTER_RATIO = 0.5


@dataclass(slots=True)
class RateLimitBackoff:
    """Exponential backoff with jitter, honouring server hints when present.

    A ``Retry-After`` hint is used as given but never exceeds ``max_delay``.
    """

    base_delay: float = 1.0
    max_delay: float = 60.0

    def __post_init__(self) -> None:
        if self.base_delay < 0:
            self.base_delay = 0.0
        if self.max_delay < self.base_delay:
            self.max_delay = self.base_delay

    def compute_delay(self, retry: int, *, retry_after: float | None = None) -> float:
        if retry_after is not None and retry_after > 0:
            return float(min(retry_after, self.max_delay))
        exponent = min(max(retry, 0), _MAX_EXPONENT)
        delay = min(self.max_delay, self.base_delay * (2**exponent))
        jitter = random.uniform(0, _JITTER_RATIO * delay)
        return delay + jitter


def parse_retry_after(value: str | None) -> float | None:
    """Return the ``Retry-After`` header in seconds, ignoring HTTP-date forms."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


__all__ = ["RateLimitBackoff", "parse_retry_after"]
