"""Framework-neutral request handler for the upload endpoint.

Any HTTP layer can call :func:`handle_upload_request` with the parsed form
fields and optional file part, then send back ``status`` and ``body``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..errors import MediaRelayError
from ..services import UploadOrchestrator, UploadRequest
from ..services.media_source import normalize_mime
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class UploadedFile:
    filename: str | None
    content: bytes
    content_type: str | None = None


@dataclass(slots=True)
class InboundResponse:
    status: int
    body: dict[str, Any]


def _field(fields: Mapping[str, Any], *names: str) -> str | None:
    for name in names:
        value = fields.get(name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _declared_type(upload: UploadedFile | None) -> str | None:
    if upload is None:
        return None
    declared = normalize_mime(upload.content_type)
    return None if declared in {None, "application/octet-stream"} else declared


def build_request(fields: Mapping[str, Any], upload: UploadedFile | None = None) -> UploadRequest:
    """Map form fields (snake or camel case) and the file part to an :class:`UploadRequest`."""
    text = fields.get("text", fields.get("tweetText"))
    return UploadRequest(
        media_url=_field(fields, "media_url", "videoUrl", "url"),
        file_content=upload.content if upload is not None else None,
        filename=upload.filename if upload is not None else None,
        mime_type=_field(fields, "mime_type", "mimeType") or _declared_type(upload),
        text=str(text) if text is not None else None,
        reply_to_post_id=_field(fields, "reply_to_post_id", "replyToTweetId"),
    )


def handle_upload_request(
    orchestrator: UploadOrchestrator,
    fields: Mapping[str, Any],
    upload: UploadedFile | None = None,
) -> InboundResponse:
    request = build_request(fields, upload)
    try:
        result = orchestrator.publish(request)
    except MediaRelayError as exc:
        status = 400 if exc.client_error else 500
        return InboundResponse(status=status, body={"error": exc.message})
    except Exception:
        LOGGER.exception("Unexpected failure while handling upload", extra={"event": "inbound.error"})
        return InboundResponse(status=500, body={"error": "Failed to upload media"})
    return InboundResponse(status=200, body={"id": result.post_id, "media_id": result.media_id})


__all__ = ["InboundResponse", "UploadedFile", "build_request", "handle_upload_request"]
