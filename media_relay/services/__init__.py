"""Upload orchestration services."""

from .media_source import MediaSource
from .upload_models import UploadRequest, UploadResult
from .upload_workflow import UploadOrchestrator

__all__ = [
    "MediaSource",
    "UploadOrchestrator",
    "UploadRequest",
    "UploadResult",
]
