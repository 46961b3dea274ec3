"""
Media intake logic.

Contains the upload request and record models plus the intake service.
"""

from .intake import MediaIntakeService, MediaRepository, TaskHandle, TaskScheduler
from .models import (
    COMPLETION_FIELDS,
    MediaRecord,
    MediaUploadRequest,
    MediaValidationError,
    SubmitOutcome,
)

__all__ = [
    "COMPLETION_FIELDS",
    "MediaIntakeService",
    "MediaRecord",
    "MediaRepository",
    "MediaUploadRequest",
    "MediaValidationError",
    "SubmitOutcome",
    "TaskHandle",
    "TaskScheduler",
]
