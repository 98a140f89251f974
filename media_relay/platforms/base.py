"""Data model and collaborator contracts for the media relay."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

CATEGORY_IMAGE = "image"
CATEGORY_VIDEO = "video"

ALLOWED_MIME_TYPES = frozenset(
    {
        "video/mp4",
        "video/quicktime",
        "image/jpeg",
        "image/png",
        "image/gif",
    }
)


def category_for(mime_type: str) -> str:
    return CATEGORY_IMAGE if mime_type.lower().startswith("image/") else CATEGORY_VIDEO


@dataclass(slots=True)
class MediaAsset:
    """A local file ready to be pushed through the upload protocol."""

    path: Path
    mime_type: str
    size: int
    temporary: bool = False

    @property
    def category(self) -> str:
        return category_for(self.mime_type)

    @property
    def is_image(self) -> bool:
        return self.category == CATEGORY_IMAGE


class InvalidTransitionError(RuntimeError):
    """Raised when an upload session is driven out of order."""


@dataclass(slots=True)
class UploadSession:
    """Tracks one INIT → APPEND → FINALIZE → STATUS run for a single media object."""

    total_bytes: int
    media_id: str | None = None
    segment_index: int = 0
    state: str = "idle"
    processing_state: str | None = None
    history: list[str] = field(default_factory=list)

    STATE_IDLE = "idle"
    STATE_INITIALIZED = "initialized"
    STATE_APPENDING = "appending"
    STATE_FINALIZED = "finalized"
    STATE_PROCESSING = "processing"
    STATE_SUCCEEDED = "succeeded"
    STATE_FAILED = "failed"

    PROCESSING_PENDING = "pending"
    PROCESSING_IN_PROGRESS = "in_progress"
    PROCESSING_SUCCEEDED = "succeeded"
    PROCESSING_FAILED = "failed"

    _TRANSITIONS = {
        "idle": ("initialized",),
        "initialized": ("appending",),
        "appending": ("appending", "finalized"),
        "finalized": ("processing", "succeeded"),
        "processing": ("processing", "succeeded"),
    }

    def mark_initialized(self, media_id: str) -> None:
        self._advance(self.STATE_INITIALIZED)
        self.media_id = media_id

    def mark_appended(self) -> int:
        """Record one APPEND call and return the index it used."""
        self._advance(self.STATE_APPENDING)
        index = self.segment_index
        self.segment_index += 1
        return index

    def mark_finalized(self) -> None:
        if self.segment_index == 0:
            raise InvalidTransitionError("FINALIZE requires at least one appended segment")
        self._advance(self.STATE_FINALIZED)

    def mark_processing(self, processing_state: str | None) -> None:
        self._advance(self.STATE_PROCESSING)
        self.processing_state = processing_state

    def mark_succeeded(self) -> None:
        self._advance(self.STATE_SUCCEEDED)
        self.processing_state = self.PROCESSING_SUCCEEDED

    def mark_failed(self, processing_state: str | None = None) -> None:
        self.history.append(self.state)
        self.state = self.STATE_FAILED
        if processing_state is not None:
            self.processing_state = processing_state

    def _advance(self, target: str) -> None:
        allowed = self._TRANSITIONS.get(self.state, ())
        if target not in allowed:
            raise InvalidTransitionError(f"Cannot move upload session from {self.state} to {target}")
        self.history.append(self.state)
        self.state = target


@dataclass(slots=True)
class PostRequest:
    """Text and media reference for a single post."""

    text: str
    media_id: str
    reply_to_post_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "text": self.text,
            "media": {"media_ids": [self.media_id]},
        }
        if self.reply_to_post_id:
            payload["reply"] = {"in_reply_to_tweet_id": self.reply_to_post_id}
        return payload


class MediaUploader(Protocol):
    """Uploads one asset and returns the platform media id."""

    def upload(self, asset: MediaAsset) -> str:
        """Run the full upload protocol for ``asset``."""


class PostPublisher(Protocol):
    """Creates a post referencing uploaded media."""

    def publish(self, post: PostRequest) -> str:
        """Create the post and return its id."""


__all__ = [
    "ALLOWED_MIME_TYPES",
    "CATEGORY_IMAGE",
    "CATEGORY_VIDEO",
    "InvalidTransitionError",
    "MediaAsset",
    "MediaUploader",
    "PostPublisher",
    "PostRequest",
    "UploadSession",
    "category_for",
]
