"""Error taxonomy shared by every layer of the relay."""

from __future__ import annotations

import json
from typing import Any, Mapping


class MediaRelayError(RuntimeError):
    """Base class for relay failures."""

    #: Whether the failure is caused by the caller's input.
    client_error = False

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    @property
    def message(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False, default=str)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class ConfigurationError(MediaRelayError):
    """A required credential or setting is missing or invalid."""


class ValidationError(MediaRelayError):
    """The inbound request cannot be served as given."""

    client_error = True


class TransportError(MediaRelayError):
    """Network failure or non rate-limit HTTP error."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if status is not None:
            merged.setdefault("status", status)
        super().__init__(message, details=merged)
        self.status = status


class RateLimitError(MediaRelayError):
    """The platform answered HTTP 429."""

    status = 429

    def __init__(
        self,
        message: str,
        *,
        retry_after: float | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if retry_after is not None:
            merged.setdefault("retry_after", retry_after)
        super().__init__(message, details=merged)
        self.retry_after = retry_after


class ProcessingTimeoutError(MediaRelayError):
    """Server-side transcoding did not finish within the polling bounds."""


class MediaProcessingError(MediaRelayError):
    """Server-side transcoding reported a failure."""


__all__ = [
    "ConfigurationError",
    "MediaProcessingError",
    "MediaRelayError",
    "ProcessingTimeoutError",
    "RateLimitError",
    "TransportError",
    "ValidationError",
]
