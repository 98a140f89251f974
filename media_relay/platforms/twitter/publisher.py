"""Post creation referencing uploaded media."""

from __future__ import annotations

from ...utils.logging import get_logger
from ..base import PostPublisher, PostRequest
from .api import TwitterApiClient, TwitterApiError

LOGGER = get_logger(__name__)


class TwitterPostPublisher(PostPublisher):
    """Creates one post per call; retries belong to the orchestrator."""

    def __init__(self, api: TwitterApiClient) -> None:
        self._api = api

    def publish(self, post: PostRequest) -> str:
        response = self._api.create_post(post.to_payload())
        data = response.get("data") or {}
        post_id = data.get("id")
        if not post_id:
            raise TwitterApiError("Post creation did not return an id", details={"response": response})
        LOGGER.info(
            "Post created",
            extra={
                "event": "post.created",
                "post_id": post_id,
                "media_id": post.media_id,
                "reply": bool(post.reply_to_post_id),
            },
        )
        return str(post_id)


__all__ = ["TwitterPostPublisher"]
