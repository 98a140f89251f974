"""Utility exports."""

from .file_helper import ensure_dir, open_staging_file, remove_quietly
from .logging import configure_logging, get_logger, register_secrets

__all__ = [
    "ensure_dir",
    "open_staging_file",
    "remove_quietly",
    "configure_logging",
    "get_logger",
    "register_secrets",
]
