"""Settings package exports."""

from .loader import (
    AppConfig,
    HttpSettings,
    PathSettings,
    TwitterSettings,
    UploadSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "HttpSettings",
    "PathSettings",
    "TwitterSettings",
    "UploadSettings",
    "load_config",
]
