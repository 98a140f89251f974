"""Interfaces and basic implementations for secret resolution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from ..errors import ConfigurationError

CONSUMER_KEY = "twitter.consumer_key"
CONSUMER_SECRET = "twitter.consumer_secret"
ACCESS_TOKEN = "twitter.access_token"
ACCESS_TOKEN_SECRET = "twitter.access_token_secret"

_REQUIRED_KEYS = (CONSUMER_KEY, CONSUMER_SECRET, ACCESS_TOKEN, ACCESS_TOKEN_SECRET)


class SecretNotFoundError(KeyError):
    """Raised when a secret cannot be resolved."""


class SecretProvider(ABC):
    """Abstract secret lookup contract."""

    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the secret associated with ``key``."""


class EnvSecretProvider(SecretProvider):
    """Reads secrets from process environment variables.

    ``twitter.consumer_key`` resolves to ``TWITTER_CONSUMER_KEY``.
    """

    def __init__(self, prefix: str = "", env: Mapping[str, str] | None = None) -> None:
        from os import environ

        self._env = env if env is not None else environ
        self._prefix = prefix

    def get_secret(self, key: str) -> str:
        compound = f"{self._prefix}{key}" if self._prefix else key
        value = self._env.get(compound.upper().replace(".", "_"))
        if not value:
            raise SecretNotFoundError(compound)
        return value


class FileSecretProvider(SecretProvider):
    """Loads secrets from INI-style files (``[twitter]`` section)."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._parser = ConfigParser()
        if path.exists():
            self._parser.read(path, encoding="utf-8")

    def get_secret(self, key: str) -> str:
        section, _, option = key.partition(".")
        if not section or not option:
            raise SecretNotFoundError(key)
        if self._parser.has_option(section, option):
            value = self._parser.get(section, option)
            if value:
                return value
        raise SecretNotFoundError(key)


class MappingSecretProvider(SecretProvider):
    """Wraps a simple dictionary for testing."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def get_secret(self, key: str) -> str:
        value = self._mapping.get(key)
        if not value:
            raise SecretNotFoundError(key)
        return value


class ChainedSecretProvider(SecretProvider):
    """Tries multiple providers until one returns a secret."""

    def __init__(self, providers: Iterable[SecretProvider]) -> None:
        self._providers = tuple(providers)

    def get_secret(self, key: str) -> str:
        for provider in self._providers:
            try:
                return provider.get_secret(key)
            except SecretNotFoundError:
                continue
        raise SecretNotFoundError(key)


@dataclass(frozen=True, slots=True)
class Credentials:
    """The four OAuth 1.0a secrets used to sign platform requests."""

    consumer_key: str
    consumer_secret: str
    access_token: str
    access_token_secret: str

    def __repr__(self) -> str:
        return "Credentials(consumer_key=***, consumer_secret=***, access_token=***, access_token_secret=***)"

    __str__ = __repr__

    def values(self) -> tuple[str, ...]:
        return (self.consumer_key, self.consumer_secret, self.access_token, self.access_token_secret)


def _env_name(key: str) -> str:
    return key.upper().replace(".", "_")


def load_credentials(provider: SecretProvider) -> Credentials:
    """Resolve all four secrets or fail with the names of the missing ones."""
    resolved: dict[str, str] = {}
    missing: list[str] = []
    for key in _REQUIRED_KEYS:
        try:
            resolved[key] = provider.get_secret(key)
        except SecretNotFoundError:
            missing.append(_env_name(key))
    if missing:
        raise ConfigurationError(
            f"Missing credential: {', '.join(missing)}",
            details={"missing": missing},
        )
    return Credentials(
        consumer_key=resolved[CONSUMER_KEY],
        consumer_secret=resolved[CONSUMER_SECRET],
        access_token=resolved[ACCESS_TOKEN],
        access_token_secret=resolved[ACCESS_TOKEN_SECRET],
    )


def default_secret_provider(
    *,
    secrets_file: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> SecretProvider:
    providers: list[SecretProvider] = [EnvSecretProvider(env=env)]
    if secrets_file is not None:
        providers.append(FileSecretProvider(secrets_file))
    return ChainedSecretProvider(providers)


__all__ = [
    "ACCESS_TOKEN",
    "ACCESS_TOKEN_SECRET",
    "CONSUMER_KEY",
    "CONSUMER_SECRET",
    "ChainedSecretProvider",
    "Credentials",
    "EnvSecretProvider",
    "FileSecretProvider",
    "MappingSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
    "default_secret_provider",
    "load_credentials",
]
