"""Wiring of configuration, credentials and components."""

from __future__ import annotations

from typing import Mapping

import requests

from ..core.http_client import HttpClient
from ..core.rate_limiter import RateLimitBackoff
from ..platforms.twitter import TwitterApiClient, TwitterMediaUploader, TwitterPostPublisher
from ..security import RequestSigner, SecretProvider, default_secret_provider, load_credentials
from ..services import MediaSource, UploadOrchestrator
from ..settings import AppConfig, load_config
from ..utils.logging import register_secrets


def build_api_client(
    config: AppConfig,
    *,
    secret_provider: SecretProvider | None = None,
    env: Mapping[str, str] | None = None,
    session: requests.Session | None = None,
) -> TwitterApiClient:
    """Resolve credentials and return a signed API client.

    Raises :class:`~media_relay.errors.ConfigurationError` before any network
    activity when a credential is missing.
    """
    provider = secret_provider or default_secret_provider(
        secrets_file=config.twitter.secrets_file, env=env
    )
    credentials = load_credentials(provider)
    register_secrets(*credentials.values())
    signer = RequestSigner(credentials)
    http_client = HttpClient(http_settings=config.http, session=session)
    return TwitterApiClient(http_client, signer, settings=config.twitter)


def build_orchestrator(
    config: AppConfig | None = None,
    *,
    secret_provider: SecretProvider | None = None,
    env: Mapping[str, str] | None = None,
    session: requests.Session | None = None,
) -> UploadOrchestrator:
    app_config = config or load_config()
    api = build_api_client(app_config, secret_provider=secret_provider, env=env, session=session)
    return UploadOrchestrator(
        MediaSource(app_config.paths.staging_dir, session=session, timeout=app_config.http.timeout),
        TwitterMediaUploader(api, settings=app_config.upload),
        TwitterPostPublisher(api),
        settings=app_config.upload,
        backoff=RateLimitBackoff(
            base_delay=app_config.http.backoff_base, max_delay=app_config.http.backoff_max
        ),
    )


__all__ = ["build_api_client", "build_orchestrator"]
