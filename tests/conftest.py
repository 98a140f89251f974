from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import pytest
import requests

from media_relay.security import Credentials


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        url: str = "https://example.test/",
    ) -> None:
        if body is None:
            body = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.status_code = status
        self.headers = headers or {}
        self.content = body
        self.text = body.decode("utf-8", errors="replace")
        self.url = url

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def iter_content(self, chunk_size: int = 1) -> Iterable[bytes]:
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


class FakeSession:
    """Replays queued responses and records every call."""

    def __init__(self, responses: Iterable[FakeResponse | Exception] = ()) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def queue(self, *responses: FakeResponse | Exception) -> None:
        self.responses.extend(responses)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._next()

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)

    def _next(self) -> FakeResponse:
        if not self.responses:
            raise AssertionError("Unexpected HTTP call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        consumer_key="ck-test",
        consumer_secret="cs-test",
        access_token="at-test",
        access_token_secret="ats-test",
    )


@pytest.fixture
def credential_env() -> dict[str, str]:
    return {
        "TWITTER_CONSUMER_KEY": "ck-test",
        "TWITTER_CONSUMER_SECRET": "cs-test",
        "TWITTER_ACCESS_TOKEN": "at-test",
        "TWITTER_ACCESS_TOKEN_SECRET": "ats-test",
    }


def write_media(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as fp:
        fp.write(b"\x00" * size)
    return path


@pytest.fixture
def media_file(tmp_path: Path):
    def _make(name: str, size: int) -> Path:
        return write_media(tmp_path / name, size)

    return _make


@pytest.fixture
def response():
    return FakeResponse
