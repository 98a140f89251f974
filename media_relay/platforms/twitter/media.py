"""Chunked media upload: INIT → APPEND → FINALIZE → STATUS polling."""

from __future__ import annotations

import base64
import time
from typing import Any, Callable, Iterator, Mapping

from ...errors import MediaProcessingError, ProcessingTimeoutError, ValidationError
from ...settings import UploadSettings
from ...utils.logging import get_logger
from ..base import MediaAsset, MediaUploader, UploadSession
from .api import TwitterApiClient, TwitterApiError

LOGGER = get_logger(__name__)

_WAITING_STATES = {UploadSession.PROCESSING_PENDING, UploadSession.PROCESSING_IN_PROGRESS}


class TwitterMediaUploader(MediaUploader):
    """Drives a single upload session to a usable media id.

    Videos are split into ``chunk_size`` segments and polled until the server
    finishes transcoding; images go up as one segment and are usable right
    after FINALIZE. Nothing is retried here: any failure propagates and the
    caller restarts from INIT.
    """

    def __init__(
        self,
        api: TwitterApiClient,
        *,
        settings: UploadSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._settings = settings or UploadSettings()
        self._sleep = sleep
        self._clock = clock

    def upload(self, asset: MediaAsset) -> str:
        if asset.size <= 0:
            raise ValidationError("Media file is empty", details={"path": str(asset.path)})

        session = UploadSession(total_bytes=asset.size)
        try:
            self._initialize(session, asset)
            self._append_all(session, asset)
            processing_info = self._finalize(session)
            finalize_state = (processing_info or {}).get("state")
            if asset.is_image or not processing_info:
                session.mark_succeeded()
            elif finalize_state == UploadSession.PROCESSING_SUCCEEDED:
                session.mark_succeeded()
            elif finalize_state == UploadSession.PROCESSING_FAILED:
                raise MediaProcessingError(
                    "Media processing failed",
                    details={"media_id": session.media_id, "error": processing_info.get("error")},
                )
            else:
                self._wait_for_processing(session, processing_info)
        except Exception:
            session.mark_failed()
            raise

        LOGGER.info(
            "Media upload completed",
            extra={
                "event": "upload.succeeded",
                "media_id": session.media_id,
                "segments": session.segment_index,
            },
        )
        return str(session.media_id)

    def check_status(self, media_id: str) -> dict[str, Any]:
        """Return the raw STATUS payload for ``media_id``."""
        return self._api.status(media_id)

    def _initialize(self, session: UploadSession, asset: MediaAsset) -> None:
        LOGGER.info(
            "Initializing upload",
            extra={
                "event": "upload.init",
                "path": asset.path.name,
                "bytes": asset.size,
                "media_type": asset.mime_type,
            },
        )
        data = self._api.init_upload(asset.size, asset.mime_type)
        session.mark_initialized(str(data["media_id_string"]))

    def _append_all(self, session: UploadSession, asset: MediaAsset) -> None:
        chunk_size = asset.size if asset.is_image else self._settings.chunk_size
        sent = 0
        for chunk in _iter_chunks(asset, chunk_size):
            index = session.mark_appended()
            LOGGER.info(
                "Uploading segment",
                extra={
                    "event": "upload.append",
                    "media_id": session.media_id,
                    "segment_index": index,
                    "bytes": len(chunk),
                },
            )
            self._api.append(
                str(session.media_id), index, base64.b64encode(chunk).decode("ascii")
            )
            sent += len(chunk)

        if sent != session.total_bytes:
            raise ValidationError(
                "Media file changed size during upload",
                details={"expected": session.total_bytes, "sent": sent},
            )

    def _finalize(self, session: UploadSession) -> Mapping[str, Any] | None:
        session.mark_finalized()
        LOGGER.info(
            "Finalizing upload",
            extra={"event": "upload.finalize", "media_id": session.media_id},
        )
        data = self._api.finalize(str(session.media_id))
        return data.get("processing_info")

    def _wait_for_processing(self, session: UploadSession, info: Mapping[str, Any]) -> None:
        settings = self._settings
        session.mark_processing(info.get("state"))
        start = self._clock()
        attempts = 0

        while attempts < settings.poll_max_attempts:
            status = self._api.status(str(session.media_id))
            attempts += 1
            info = status.get("processing_info") or {}
            state = info.get("state", UploadSession.PROCESSING_SUCCEEDED)

            LOGGER.info(
                "Media processing status",
                extra={
                    "event": "upload.status",
                    "media_id": session.media_id,
                    "state": state,
                    "attempt": attempts,
                    "max_attempts": settings.poll_max_attempts,
                },
            )

            if state == UploadSession.PROCESSING_SUCCEEDED:
                session.mark_succeeded()
                return
            if state == UploadSession.PROCESSING_FAILED:
                session.processing_state = state
                raise MediaProcessingError(
                    "Media processing failed",
                    details={"media_id": session.media_id, "error": info.get("error")},
                )
            if state not in _WAITING_STATES:
                raise TwitterApiError(
                    f"Unexpected processing state: {state}",
                    details={"media_id": session.media_id},
                )
            session.mark_processing(state)

            if attempts >= settings.poll_max_attempts:
                break

            wait_seconds = self._poll_interval(info)
            elapsed = self._clock() - start
            if elapsed + wait_seconds > settings.poll_max_seconds:
                raise ProcessingTimeoutError(
                    "Media processing exceeded maximum time limit",
                    details={
                        "media_id": session.media_id,
                        "elapsed": round(elapsed, 3),
                        "limit": settings.poll_max_seconds,
                    },
                )
            self._sleep(wait_seconds)

        raise ProcessingTimeoutError(
            "Media processing did not finish after maximum attempts",
            details={"media_id": session.media_id, "attempts": attempts},
        )

    def _poll_interval(self, info: Mapping[str, Any]) -> float:
        raw = info.get("check_after_secs")
        try:
            suggested = float(raw) if raw is not None else 0.0
        except (TypeError, ValueError):
            suggested = 0.0
        if suggested <= 0:
            suggested = self._settings.poll_default_interval
        return min(suggested, self._settings.poll_max_interval)


def _iter_chunks(asset: MediaAsset, chunk_size: int) -> Iterator[bytes]:
    """Yield at most ``asset.size`` bytes; a file that grew since it was sized is rejected."""
    remaining = asset.size
    with asset.path.open("rb") as stream:
        while remaining > 0:
            chunk = stream.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
        if stream.read(1):
            raise ValidationError(
                "Media file changed size during upload",
                details={"expected": asset.size, "path": asset.path.name},
            )


__all__ = ["TwitterMediaUploader"]
