"""Workflow for uploading media and publishing a post that references it."""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from ..core.rate_limiter import RateLimitBackoff
from ..errors import MediaRelayError, RateLimitError
from ..platforms import MediaAsset, MediaUploader, PostPublisher, PostRequest
from ..settings import UploadSettings
from ..utils.file_helper import remove_quietly
from ..utils.logging import get_logger
from .media_source import MediaSource
from .upload_models import UploadRequest, UploadResult

LOGGER = get_logger(__name__)


class UploadOrchestrator:
    """Coordinates source resolution, media upload, post creation and cleanup."""

    def __init__(
        self,
        media_source: MediaSource,
        media_uploader: MediaUploader,
        post_publisher: PostPublisher,
        *,
        settings: UploadSettings | None = None,
        backoff: RateLimitBackoff | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._media_source = media_source
        self._media_uploader = media_uploader
        self._post_publisher = post_publisher
        self._settings = settings or UploadSettings()
        self._backoff = backoff or RateLimitBackoff()
        self._sleep = sleep

    def publish(self, request: UploadRequest) -> UploadResult:
        asset = self._media_source.resolve(request)
        try:
            return self._publish_with_retry(asset, request)
        except MediaRelayError as exc:
            LOGGER.error(
                "Media upload or post failed",
                extra={"event": "workflow.failed", "error_type": type(exc).__name__, "error": exc.message},
            )
            raise
        finally:
            if asset.temporary:
                remove_quietly(asset.path)

    async def publish_async(self, request: UploadRequest) -> UploadResult:
        """Run :meth:`publish` on a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.publish, request)

    def _publish_with_retry(self, asset: MediaAsset, request: UploadRequest) -> UploadResult:
        max_attempts = self._settings.max_attempts
        text = request.text if request.text is not None else self._settings.default_text

        attempt = 0
        while True:
            attempt += 1
            try:
                media_id = self._media_uploader.upload(asset)
                post_id = self._post_publisher.publish(
                    PostRequest(text=text, media_id=media_id, reply_to_post_id=request.reply_to_post_id)
                )
            except RateLimitError as exc:
                if attempt >= max_attempts:
                    raise RateLimitError(
                        "Max retries exceeded during upload",
                        retry_after=exc.retry_after,
                        details={"attempts": attempt},
                    ) from exc
                wait_seconds = self._backoff.compute_delay(attempt - 1, retry_after=exc.retry_after)
                LOGGER.warning(
                    "Rate limit hit; restarting upload",
                    extra={
                        "event": "workflow.retry",
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "wait": round(wait_seconds, 3),
                    },
                )
                self._sleep(wait_seconds)
                continue

            return UploadResult(
                post_id=post_id,
                media_id=media_id,
                mime_type=asset.mime_type,
                attempts=attempt,
            )
