from __future__ import annotations

from pathlib import Path

import pytest
import requests

from media_relay.errors import TransportError, ValidationError
from media_relay.services import MediaSource, UploadRequest
from media_relay.services.media_source import normalize_mime


def _source(tmp_path: Path, session=None) -> MediaSource:
    return MediaSource(tmp_path / "staging", session=session, timeout=3)


def _staged(tmp_path: Path) -> list[Path]:
    staging = tmp_path / "staging"
    return sorted(staging.iterdir()) if staging.exists() else []


def test_request_without_source_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError) as excinfo:
        _source(tmp_path).resolve(UploadRequest(text="hello"))

    assert excinfo.value.message == "A media URL or file is required"


def test_request_with_two_sources_is_rejected(tmp_path: Path) -> None:
    request = UploadRequest(media_url="https://cdn.test/a.mp4", file_content=b"abc", filename="a.mp4")

    with pytest.raises(ValidationError):
        _source(tmp_path).resolve(request)


def test_buffer_is_staged_as_temporary_file(tmp_path: Path) -> None:
    asset = _source(tmp_path).resolve(UploadRequest(file_content=b"\x89PNG", filename="shot.PNG"))

    assert asset.temporary
    assert asset.mime_type == "image/png"
    assert asset.size == 4
    assert asset.path.read_bytes() == b"\x89PNG"
    assert asset.path.suffix == ".png"
    assert asset.path.parent == tmp_path / "staging"


def test_buffer_with_unsupported_type_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _source(tmp_path).resolve(UploadRequest(file_content=b"%PDF", filename="doc.pdf"))

    assert _staged(tmp_path) == []


def test_local_path_is_not_temporary(tmp_path: Path, media_file) -> None:
    path = media_file("clip.mov", 10)

    asset = _source(tmp_path).resolve(UploadRequest(file_path=path))

    assert not asset.temporary
    assert asset.path == path
    assert asset.mime_type == "video/quicktime"


def test_missing_local_path_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _source(tmp_path).resolve(UploadRequest(file_path=tmp_path / "nope.mp4"))


def test_url_download_uses_content_type(tmp_path: Path, fake_session, response) -> None:
    fake_session.queue(response(200, body=b"GIF89a", headers={"Content-Type": "image/gif; charset=binary"}))

    asset = _source(tmp_path, fake_session).resolve(UploadRequest(media_url="https://cdn.test/media/file"))

    assert asset.mime_type == "image/gif"
    assert asset.temporary
    assert asset.path.read_bytes() == b"GIF89a"
    assert fake_session.calls[0]["stream"] is True
    assert fake_session.calls[0]["timeout"] == 3


def test_url_download_defaults_to_mp4(tmp_path: Path, fake_session, response) -> None:
    fake_session.queue(response(200, body=b"\x00" * 32, headers={"Content-Type": "application/octet-stream"}))

    asset = _source(tmp_path, fake_session).resolve(UploadRequest(media_url="https://cdn.test/stream"))

    assert asset.mime_type == "video/mp4"
    assert asset.size == 32


def test_explicit_mime_type_wins(tmp_path: Path, fake_session, response) -> None:
    fake_session.queue(response(200, body=b"\x00" * 8, headers={"Content-Type": "video/mp4"}))

    asset = _source(tmp_path, fake_session).resolve(
        UploadRequest(media_url="https://cdn.test/a.mp4", mime_type="video/quicktime")
    )

    assert asset.mime_type == "video/quicktime"


def test_unsupported_download_is_removed(tmp_path: Path, fake_session, response) -> None:
    fake_session.queue(response(200, body=b"<html>", headers={"Content-Type": "text/html"}))

    with pytest.raises(ValidationError):
        _source(tmp_path, fake_session).resolve(UploadRequest(media_url="https://cdn.test/page"))

    assert _staged(tmp_path) == []


def test_failed_download_raises_transport_error(tmp_path: Path, fake_session, response) -> None:
    fake_session.queue(response(404, body=b"missing"))

    with pytest.raises(TransportError) as excinfo:
        _source(tmp_path, fake_session).resolve(UploadRequest(media_url="https://cdn.test/a.mp4"))

    assert excinfo.value.status == 404
    assert _staged(tmp_path) == []


def test_connection_error_raises_transport_error(tmp_path: Path, fake_session) -> None:
    fake_session.queue(requests.ConnectionError("dns"))

    with pytest.raises(TransportError):
        _source(tmp_path, fake_session).resolve(UploadRequest(media_url="https://cdn.test/a.mp4"))

    assert _staged(tmp_path) == []


def test_non_http_url_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _source(tmp_path).resolve(UploadRequest(media_url="ftp://cdn.test/a.mp4"))


def test_normalize_mime_strips_parameters() -> None:
    assert normalize_mime("Video/MP4; codecs=avc1") == "video/mp4"
    assert normalize_mime(None) is None
