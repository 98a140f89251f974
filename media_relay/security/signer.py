"""OAuth 1.0a request signing for platform calls."""

from __future__ import annotations

from typing import Any, Mapping

import requests
from requests_oauthlib import OAuth1

from ..errors import ConfigurationError
from .credential_provider import Credentials


class RequestSigner:
    """Produces HMAC-SHA1 ``Authorization`` headers from the static credentials.

    Every call yields a fresh nonce and timestamp, so two identical requests
    never share a header. Form and query parameters take part in the signature
    base string; JSON bodies do not.
    """

    def __init__(self, credentials: Credentials) -> None:
        missing = [
            name
            for name, value in (
                ("consumer_key", credentials.consumer_key),
                ("consumer_secret", credentials.consumer_secret),
                ("access_token", credentials.access_token),
                ("access_token_secret", credentials.access_token_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing credential: {', '.join(missing)}", details={"missing": missing}
            )
        self._auth = OAuth1(
            credentials.consumer_key,
            client_secret=credentials.consumer_secret,
            resource_owner_key=credentials.access_token,
            resource_owner_secret=credentials.access_token_secret,
            signature_method="HMAC-SHA1",
        )

    @property
    def auth(self) -> OAuth1:
        """``requests`` auth hook; signs each prepared request as it is sent."""
        return self._auth

    def sign(self, method: str, url: str, params: Mapping[str, Any] | None = None) -> str:
        """Return the ``Authorization`` header value for the given request."""
        method = method.upper()
        if method in {"GET", "DELETE", "HEAD"}:
            request = requests.Request(method, url, params=dict(params or {}))
        else:
            request = requests.Request(method, url, data=dict(params or {}))
        prepared = self._auth(request.prepare())
        header = prepared.headers["Authorization"]
        if isinstance(header, bytes):
            header = header.decode("utf-8")
        return header


__all__ = ["RequestSigner"]
