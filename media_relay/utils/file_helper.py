"""Filesystem helpers for staged media files."""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import BinaryIO

_LOGGER = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def open_staging_file(directory: Path, *, suffix: str = "", prefix: str = "media") -> tuple[Path, BinaryIO]:
    """Create a uniquely named file under ``directory`` and return it open for writing.

    Names are ``<prefix>-<time_ns>-<random><suffix>``; exclusive creation means
    two concurrent uploads can never share a file.
    """
    ensure_dir(directory)
    path = directory / f"{prefix}-{time.time_ns()}-{uuid.uuid4().hex[:8]}{suffix}"
    return path, path.open("xb")


def remove_quietly(path: Path) -> bool:
    """Delete ``path``; log and report failure instead of raising."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        _LOGGER.warning(
            "Failed to remove staged file",
            extra={"event": "staging.cleanup_failed", "path": str(path), "reason": str(exc)},
        )
        return False
    return True
