"""Helpers for loading configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:  # pragma: no cover - Python 3.11+ includes tomllib
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older versions
    import tomli as tomllib  # type: ignore[no-redef]

from ..errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "MEDIA_RELAY_CONFIG"

DEFAULT_UPLOAD_URL = "https://upload.twitter.com/1.1/media/upload.json"
DEFAULT_POST_URL = "https://api.twitter.com/2/tweets"
DEFAULT_POST_TEXT = "Uploaded a new media! 🎥 #MediaUpload"
DEFAULT_CHUNK_SIZE = 5 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class HttpSettings:
    timeout: float = 30.0
    backoff_base: float = 1.0
    backoff_max: float = 60.0


@dataclass(frozen=True, slots=True)
class UploadSettings:
    """Chunking, polling and retry bounds for a single upload."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    poll_max_attempts: int = 10
    poll_max_seconds: float = 300.0
    poll_default_interval: float = 2.0
    poll_max_interval: float = 30.0
    max_attempts: int = 3
    default_text: str = DEFAULT_POST_TEXT


@dataclass(frozen=True, slots=True)
class TwitterSettings:
    upload_url: str = DEFAULT_UPLOAD_URL
    post_url: str = DEFAULT_POST_URL
    secrets_file: Path | None = None


@dataclass(frozen=True, slots=True)
class PathSettings:
    staging_dir: Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    http: HttpSettings
    upload: UploadSettings
    twitter: TwitterSettings
    paths: PathSettings


def _to_path(value: str | None, *, fallback: Path) -> Path:
    if not value:
        return fallback
    candidate = Path(value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    if explicit:
        candidate, required = Path(explicit), True
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        if env_value:
            candidate, required = Path(env_value), True
        else:
            candidate, required = PROJECT_ROOT / DEFAULT_CONFIG_NAME, False
    resolved = candidate if candidate.is_absolute() else PROJECT_ROOT / candidate
    return resolved, required


def _load_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as fp:
        try:
            return tomllib.load(fp)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(
                "Config file is not valid TOML", details={"path": str(path), "reason": str(exc)}
            ) from exc


def _number(section: Mapping[str, Any], key: str, default: float, *, cast=float, minimum: float = 0):
    raw = section.get(key, default)
    try:
        value = cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Setting '{key}' must be numeric", details={"value": raw}
        ) from exc
    if value < minimum:
        raise ConfigurationError(
            f"Setting '{key}' must be >= {minimum}", details={"value": value}
        )
    return value


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path, required = _config_path(config_path)
    data = _load_toml(path, required=required)

    http_section = data.get("http", {})
    upload_section = data.get("upload", {})
    twitter_section = data.get("twitter", {})
    paths_section = data.get("paths", {})

    http_defaults = HttpSettings()
    defaults = UploadSettings()
    http_settings = HttpSettings(
        timeout=_number(http_section, "timeout", http_defaults.timeout, minimum=0.001),
        backoff_base=_number(http_section, "backoff_base", http_defaults.backoff_base),
        backoff_max=_number(http_section, "backoff_max", http_defaults.backoff_max),
    )
    upload_settings = UploadSettings(
        chunk_size=_number(upload_section, "chunk_size", defaults.chunk_size, cast=int, minimum=1),
        poll_max_attempts=_number(
            upload_section, "poll_max_attempts", defaults.poll_max_attempts, cast=int, minimum=1
        ),
        poll_max_seconds=_number(upload_section, "poll_max_seconds", defaults.poll_max_seconds),
        poll_default_interval=_number(
            upload_section, "poll_default_interval", defaults.poll_default_interval
        ),
        poll_max_interval=_number(upload_section, "poll_max_interval", defaults.poll_max_interval),
        max_attempts=_number(upload_section, "max_attempts", defaults.max_attempts, cast=int, minimum=1),
        default_text=str(upload_section.get("default_text", defaults.default_text)),
    )

    secrets_value = twitter_section.get("secrets_file")
    twitter_settings = TwitterSettings(
        upload_url=str(twitter_section.get("upload_url", DEFAULT_UPLOAD_URL)),
        post_url=str(twitter_section.get("post_url", DEFAULT_POST_URL)),
        secrets_file=_to_path(secrets_value, fallback=PROJECT_ROOT) if secrets_value else None,
    )

    data_dir = _to_path(paths_section.get("data_dir"), fallback=PROJECT_ROOT / "data")
    path_settings = PathSettings(
        staging_dir=_to_path(paths_section.get("staging_dir"), fallback=data_dir / "uploads"),
    )

    return AppConfig(
        http=http_settings,
        upload=upload_settings,
        twitter=twitter_settings,
        paths=path_settings,
    )
