"""Credential resolution and request signing."""

from __future__ import annotations

from .credential_provider import (
    ChainedSecretProvider,
    Credentials,
    SecretProvider,
    default_secret_provider,
    load_credentials,
)
from .signer import RequestSigner

__all__ = [
    "ChainedSecretProvider",
    "Credentials",
    "RequestSigner",
    "SecretProvider",
    "default_secret_provider",
    "load_credentials",
]
