"""HTTP transport with timeouts and a single transparent rate-limit retry."""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import requests

from ..errors import RateLimitError, TransportError
from ..settings import HttpSettings
from .rate_limiter import RateLimitBackoff, parse_retry_after

_LOGGER = logging.getLogger(__name__)
_BODY_PREVIEW = 200
_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class SessionProvider:
    """Hands every thread its own ``requests.Session``.

    An injected session is returned as is and shared by all callers.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._shared = session
        self._local = threading.local()

    def get(self) -> requests.Session:
        if self._shared is not None:
            return self._shared
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session


@dataclass(slots=True)
class HttpRequest:
    url: str
    method: str = "GET"
    params: Mapping[str, Any] | None = None
    form: Mapping[str, Any] | None = None
    json: Any = None
    headers: Mapping[str, str] | None = None
    auth: Any = None
    timeout: float | None = None


@dataclass(slots=True)
class HttpResponse:
    url: str
    status: int
    headers: Mapping[str, str]
    body: bytes
    text: str
    elapsed: float

    def json(self) -> Any:
        if not self.body:
            return {}
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                "Response body is not valid JSON",
                status=self.status,
                details={"url": self.url, "body": self.text[:_BODY_PREVIEW]},
            ) from exc


class HttpClient:
    """Stateless request executor backed by a ``requests.Session``.

    A 429 answer is retried once after the server's ``Retry-After`` delay (or
    the first backoff step); a second 429 surfaces as :class:`RateLimitError`
    so the caller's retry policy can take over.
    """

    def __init__(
        self,
        *,
        http_settings: HttpSettings,
        session: requests.Session | None = None,
        backoff: RateLimitBackoff | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._http_settings = http_settings
        self._sessions = SessionProvider(session)
        self._backoff = backoff or RateLimitBackoff(
            base_delay=http_settings.backoff_base, max_delay=http_settings.backoff_max
        )
        self._sleep = sleep

    def send(self, request: HttpRequest) -> HttpResponse:
        retried = False
        start_time = time.monotonic()
        while True:
            response = self._perform(request)
            if response.status_code == 429:
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                if retried:
                    raise RateLimitError(
                        "Rate limit exceeded",
                        retry_after=retry_after,
                        details={"url": request.url, "method": request.method.upper()},
                    )
                retried = True
                wait_seconds = self._backoff.compute_delay(0, retry_after=retry_after)
                _LOGGER.warning(
                    "Rate limit hit; retrying once",
                    extra={"event": "http.rate_limited", "url": request.url, "wait": wait_seconds},
                )
                self._sleep(wait_seconds)
                continue

            if response.status_code >= 400:
                raise TransportError(
                    f"HTTP {response.status_code} from {request.method.upper()} {request.url}",
                    status=response.status_code,
                    details={"body": response.text[:_BODY_PREVIEW]},
                )

            return HttpResponse(
                url=response.url,
                status=response.status_code,
                headers=dict(response.headers),
                body=response.content,
                text=response.text,
                elapsed=time.monotonic() - start_time,
            )

    def _perform(self, request: HttpRequest) -> requests.Response:
        timeout = request.timeout if request.timeout is not None else self._http_settings.timeout
        headers = dict(request.headers or {})
        if request.form is not None:
            headers.setdefault("Content-Type", _FORM_CONTENT_TYPE)
        try:
            return self._sessions.get().request(
                request.method.upper(),
                request.url,
                params=request.params,
                data=dict(request.form) if request.form is not None else None,
                json=request.json,
                headers=headers,
                auth=request.auth,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(
                f"Request to {request.url} failed",
                details={"method": request.method.upper(), "reason": str(exc)},
            ) from exc


__all__ = ["HttpClient", "HttpRequest", "HttpResponse", "SessionProvider"]
