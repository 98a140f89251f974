"""Twitter media-upload and post endpoints."""

from __future__ import annotations

from typing import Any, Mapping

from ...core.http_client import HttpClient, HttpRequest
from ...errors import TransportError
from ...security.signer import RequestSigner
from ...settings import TwitterSettings


class TwitterApiError(TransportError):
    """Raised when the platform answers with an unusable payload."""


class TwitterApiClient:
    """Thin signed wrapper around the upload and post endpoints.

    Each method maps to exactly one HTTP call; sequencing lives in
    :class:`~media_relay.platforms.twitter.media.TwitterMediaUploader`.
    """

    def __init__(
        self,
        http_client: HttpClient,
        signer: RequestSigner,
        *,
        settings: TwitterSettings | None = None,
    ) -> None:
        self._http = http_client
        self._signer = signer
        self._settings = settings or TwitterSettings()

    @property
    def upload_url(self) -> str:
        return self._settings.upload_url

    def init_upload(self, total_bytes: int, media_type: str) -> dict[str, Any]:
        data = self._post_form(
            {"command": "INIT", "total_bytes": total_bytes, "media_type": media_type}
        )
        if not data.get("media_id_string"):
            raise TwitterApiError("INIT response is missing media_id_string", details={"response": data})
        return data

    def append(self, media_id: str, segment_index: int, media_b64: str) -> None:
        self._post_form(
            {
                "command": "APPEND",
                "media_id": media_id,
                "segment_index": segment_index,
                "media": media_b64,
            },
            expect_body=False,
        )

    def finalize(self, media_id: str) -> dict[str, Any]:
        return self._post_form({"command": "FINALIZE", "media_id": media_id})

    def status(self, media_id: str) -> dict[str, Any]:
        response = self._http.send(
            HttpRequest(
                url=self._settings.upload_url,
                method="GET",
                params={"command": "STATUS", "media_id": media_id},
                auth=self._signer.auth,
            )
        )
        return self._as_mapping(response.json())

    def create_post(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        response = self._http.send(
            HttpRequest(
                url=self._settings.post_url,
                method="POST",
                json=dict(payload),
                auth=self._signer.auth,
            )
        )
        return self._as_mapping(response.json())

    def _post_form(self, form: Mapping[str, Any], *, expect_body: bool = True) -> dict[str, Any]:
        response = self._http.send(
            HttpRequest(
                url=self._settings.upload_url,
                method="POST",
                form=form,
                auth=self._signer.auth,
            )
        )
        if not expect_body:
            return {}
        return self._as_mapping(response.json())

    def _as_mapping(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise TwitterApiError("Expected a JSON object from the platform", details={"response": data})
        if data.get("errors") and not data.get("data") and not data.get("media_id_string"):
            raise TwitterApiError("Platform returned errors", details={"errors": data["errors"]})
        return data


__all__ = ["TwitterApiClient", "TwitterApiError"]
