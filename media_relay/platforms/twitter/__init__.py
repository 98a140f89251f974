"""Twitter platform adapters."""

from __future__ import annotations

from .api import TwitterApiClient, TwitterApiError
from .media import TwitterMediaUploader
from .publisher import TwitterPostPublisher

__all__ = [
    "TwitterApiClient",
    "TwitterApiError",
    "TwitterMediaUploader",
    "TwitterPostPublisher",
]
