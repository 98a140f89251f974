"""Platform integration package."""

from __future__ import annotations

from .base import (
    ALLOWED_MIME_TYPES,
    MediaAsset,
    MediaUploader,
    PostPublisher,
    PostRequest,
    UploadSession,
)

__all__ = [
    "ALLOWED_MIME_TYPES",
    "MediaAsset",
    "MediaUploader",
    "PostPublisher",
    "PostRequest",
    "UploadSession",
]
