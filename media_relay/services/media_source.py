"""Turns an inbound request into a local, classified media file."""

from __future__ import annotations

import mimetypes
import urllib.parse
from pathlib import Path, PurePosixPath

import requests

from ..core.http_client import SessionProvider
from ..errors import TransportError, ValidationError
from ..platforms.base import ALLOWED_MIME_TYPES, MediaAsset
from ..utils.file_helper import open_staging_file, remove_quietly
from ..utils.logging import get_logger
from .upload_models import UploadRequest

LOGGER = get_logger(__name__)

DEFAULT_DOWNLOAD_MIME = "video/mp4"
_GENERIC_CONTENT_TYPES = {"application/octet-stream", "binary/octet-stream", ""}
_DOWNLOAD_CHUNK = 1024 * 1024


def normalize_mime(value: str | None) -> str | None:
    if not value:
        return None
    return value.split(";", 1)[0].strip().lower() or None


def guess_mime(name: str | None) -> str | None:
    if not name:
        return None
    return normalize_mime(mimetypes.guess_type(name)[0])


def validate_mime(mime_type: str | None) -> str:
    """Return ``mime_type`` when it is an accepted upload type."""
    normalized = normalize_mime(mime_type)
    if normalized not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            f"Unsupported media type: {mime_type or '<unknown>'}",
            details={"allowed": sorted(ALLOWED_MIME_TYPES)},
        )
    return normalized


class MediaSource:
    """Resolves URLs, uploaded buffers and local paths into :class:`MediaAsset`.

    Downloads and uploaded buffers are written to the staging directory and
    flagged ``temporary`` so the orchestrator removes them afterwards; caller
    supplied paths are never deleted.
    """

    def __init__(
        self,
        staging_dir: Path,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._staging_dir = staging_dir
        self._sessions = SessionProvider(session)
        self._timeout = timeout

    def resolve(self, request: UploadRequest) -> MediaAsset:
        provided = [
            name
            for name, value in (
                ("media_url", request.media_url),
                ("file_path", request.file_path),
                ("file_content", request.file_content),
            )
            if value is not None and value != ""
        ]
        if not provided:
            raise ValidationError("A media URL or file is required")
        if len(provided) > 1:
            raise ValidationError(
                "Provide only one media source", details={"provided": provided}
            )

        if request.file_content is not None:
            return self._from_buffer(request)
        if request.file_path is not None:
            return self._from_path(Path(request.file_path), request.mime_type)
        return self._from_url(str(request.media_url), request.mime_type)

    def _from_path(self, path: Path, mime_type: str | None) -> MediaAsset:
        if not path.is_file():
            raise ValidationError(f"File not found: {path}")
        resolved = validate_mime(mime_type or guess_mime(path.name))
        return MediaAsset(path=path, mime_type=resolved, size=path.stat().st_size)

    def _from_buffer(self, request: UploadRequest) -> MediaAsset:
        content = request.file_content or b""
        resolved = validate_mime(request.mime_type or guess_mime(request.filename))
        if not content:
            raise ValidationError("Uploaded file is empty")
        path, stream = open_staging_file(self._staging_dir, suffix=self._suffix_for(request.filename, resolved))
        try:
            with stream:
                stream.write(content)
        except OSError:
            remove_quietly(path)
            raise
        LOGGER.info(
            "Staged uploaded file",
            extra={"event": "source.staged", "path": path.name, "bytes": len(content)},
        )
        return MediaAsset(path=path, mime_type=resolved, size=len(content), temporary=True)

    def _from_url(self, url: str, mime_type: str | None) -> MediaAsset:
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValidationError(f"Invalid media URL: {url}")
        if mime_type:
            validate_mime(mime_type)

        url_name = PurePosixPath(parsed.path).name
        path, content_type = self._download(url, suffix=PurePosixPath(url_name).suffix)
        try:
            header_type = normalize_mime(content_type)
            if header_type in _GENERIC_CONTENT_TYPES:
                header_type = None
            resolved = validate_mime(
                mime_type or header_type or guess_mime(url_name) or DEFAULT_DOWNLOAD_MIME
            )
            if path.stat().st_size == 0:
                raise ValidationError("Downloaded media is empty", details={"url": url})
        except ValidationError:
            remove_quietly(path)
            raise
        return MediaAsset(path=path, mime_type=resolved, size=path.stat().st_size, temporary=True)

    def _download(self, url: str, *, suffix: str) -> tuple[Path, str | None]:
        LOGGER.info("Downloading media", extra={"event": "source.download", "url": url})
        path, stream = open_staging_file(self._staging_dir, suffix=suffix)
        session = self._sessions.get()
        try:
            with stream, session.get(url, stream=True, timeout=self._timeout) as response:
                response.raise_for_status()
                content_type = response.headers.get("Content-Type")
                for chunk in response.iter_content(chunk_size=_DOWNLOAD_CHUNK):
                    if chunk:
                        stream.write(chunk)
        except requests.RequestException as exc:
            remove_quietly(path)
            status = getattr(getattr(exc, "response", None), "status_code", None)
            raise TransportError(
                f"Media download failed: {exc}", status=status, details={"url": url}
            ) from exc
        except OSError:
            remove_quietly(path)
            raise
        return path, content_type

    def _suffix_for(self, filename: str | None, mime_type: str) -> str:
        if filename:
            suffix = PurePosixPath(filename).suffix
            if suffix:
                return suffix.lower()
        return mimetypes.guess_extension(mime_type) or ""


__all__ = ["MediaSource", "guess_mime", "normalize_mime", "validate_mime"]
