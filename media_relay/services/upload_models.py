"""Data models for the upload-and-post workflow."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class UploadRequest:
    """Inbound request: exactly one media source plus post options."""

    media_url: str | None = None
    file_path: Path | None = None
    file_content: bytes | None = None
    filename: str | None = None
    mime_type: str | None = None
    text: str | None = None
    reply_to_post_id: str | None = None


@dataclass(slots=True)
class UploadResult:
    """Outcome of a successful upload and publish."""

    post_id: str
    media_id: str
    mime_type: str
    attempts: int = 1

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.post_id,
            "media_id": self.media_id,
            "mime_type": self.mime_type,
            "attempts": self.attempts,
        }
