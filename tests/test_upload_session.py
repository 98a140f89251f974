from __future__ import annotations

import pytest

from media_relay.platforms import MediaAsset, PostRequest, UploadSession
from media_relay.platforms.base import InvalidTransitionError


def test_session_walks_the_happy_path() -> None:
    session = UploadSession(total_bytes=10)

    session.mark_initialized("m1")
    assert session.mark_appended() == 0
    assert session.mark_appended() == 1
    session.mark_finalized()
    session.mark_processing("pending")
    session.mark_processing("in_progress")
    session.mark_succeeded()

    assert session.state == UploadSession.STATE_SUCCEEDED
    assert session.processing_state == UploadSession.PROCESSING_SUCCEEDED
    assert session.segment_index == 2
    assert session.history[0] == UploadSession.STATE_IDLE


def test_append_before_init_is_rejected() -> None:
    session = UploadSession(total_bytes=10)

    with pytest.raises(InvalidTransitionError):
        session.mark_appended()


def test_finalize_requires_an_appended_segment() -> None:
    session = UploadSession(total_bytes=10)
    session.mark_initialized("m1")

    with pytest.raises(InvalidTransitionError):
        session.mark_finalized()


def test_finalize_can_complete_without_processing() -> None:
    session = UploadSession(total_bytes=10)
    session.mark_initialized("m1")
    session.mark_appended()
    session.mark_finalized()
    session.mark_succeeded()

    assert session.state == UploadSession.STATE_SUCCEEDED


def test_failed_session_is_terminal() -> None:
    session = UploadSession(total_bytes=10)
    session.mark_initialized("m1")
    session.mark_failed("failed")

    assert session.state == UploadSession.STATE_FAILED
    assert session.processing_state == "failed"
    with pytest.raises(InvalidTransitionError):
        session.mark_appended()


def test_asset_category_follows_mime_type(tmp_path) -> None:
    assert MediaAsset(tmp_path / "a.jpg", "image/jpeg", 1).is_image
    assert not MediaAsset(tmp_path / "a.mp4", "video/mp4", 1).is_image


def test_post_payload_only_includes_reply_when_present() -> None:
    plain = PostRequest(text="hello", media_id="m1").to_payload()
    reply = PostRequest(text="hello", media_id="m1", reply_to_post_id="p9").to_payload()

    assert plain == {"text": "hello", "media": {"media_ids": ["m1"]}}
    assert reply["reply"] == {"in_reply_to_tweet_id": "p9"}
