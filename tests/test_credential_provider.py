from __future__ import annotations

from pathlib import Path

import pytest

from media_relay.errors import ConfigurationError
from media_relay.security import default_secret_provider, load_credentials
from media_relay.security.credential_provider import (
    ChainedSecretProvider,
    EnvSecretProvider,
    FileSecretProvider,
    MappingSecretProvider,
    SecretNotFoundError,
)


def test_env_provider_maps_dotted_keys(credential_env: dict[str, str]) -> None:
    provider = EnvSecretProvider(env=credential_env)

    assert provider.get_secret("twitter.consumer_key") == "ck-test"
    assert provider.get_secret("twitter.access_token_secret") == "ats-test"


def test_env_provider_treats_empty_as_missing() -> None:
    provider = EnvSecretProvider(env={"TWITTER_CONSUMER_KEY": ""})

    with pytest.raises(SecretNotFoundError):
        provider.get_secret("twitter.consumer_key")


def test_load_credentials_reports_every_missing_name() -> None:
    provider = MappingSecretProvider({"twitter.access_token": "at", "twitter.access_token_secret": "ats"})

    with pytest.raises(ConfigurationError) as excinfo:
        load_credentials(provider)

    assert excinfo.value.message == "Missing credential: TWITTER_CONSUMER_KEY, TWITTER_CONSUMER_SECRET"
    assert excinfo.value.details["missing"] == ["TWITTER_CONSUMER_KEY", "TWITTER_CONSUMER_SECRET"]


def test_credentials_repr_masks_values(credential_env: dict[str, str]) -> None:
    credentials = load_credentials(EnvSecretProvider(env=credential_env))

    rendered = repr(credentials) + str(credentials)

    for secret in credential_env.values():
        assert secret not in rendered
    assert credentials.values() == ("ck-test", "cs-test", "at-test", "ats-test")


def test_file_provider_reads_twitter_section(tmp_path: Path) -> None:
    secrets = tmp_path / "secrets.ini"
    secrets.write_text("[twitter]\nconsumer_key = from-file\n", encoding="utf-8")

    provider = FileSecretProvider(secrets)

    assert provider.get_secret("twitter.consumer_key") == "from-file"
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("twitter.consumer_secret")


def test_default_provider_prefers_environment(tmp_path: Path) -> None:
    secrets = tmp_path / "secrets.ini"
    secrets.write_text(
        "[twitter]\nconsumer_key = from-file\nconsumer_secret = file-secret\n", encoding="utf-8"
    )

    provider = default_secret_provider(secrets_file=secrets, env={"TWITTER_CONSUMER_KEY": "from-env"})

    assert isinstance(provider, ChainedSecretProvider)
    assert provider.get_secret("twitter.consumer_key") == "from-env"
    assert provider.get_secret("twitter.consumer_secret") == "file-secret"
