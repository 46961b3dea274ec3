"""
Domain models for media intake.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. The document layout (camelCase
keys) is part of the domain because the frontend reads these documents
directly from the store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


VIDEO_TYPE = "video"
NO_VIDEO_LENGTH = "none"

STATUS_QUEUED = "queued"
STATUS_COMPLETE = "complete"

PLACEHOLDER_URL_BASE = "https://placehold.co/400x300/cccccc/000000"

# Applied to a queued video once simulated processing finishes.
COMPLETION_FIELDS: dict[str, Any] = {
    "processed": True,
    "processingStatus": STATUS_COMPLETE,
}


class MediaValidationError(ValueError):
    """Raised when an upload request is missing required fields."""
    pass


def processing_status_for(video_length: Any) -> str:
    """Status shown while a video is being processed."""
    return f"processing for {video_length}"


def build_placeholder_url(media_type: Any, now: datetime) -> str:
    """No asset is stored, so every record points at a generated placeholder image."""
    millis = int(now.timestamp() * 1000)
    return f"{PLACEHOLDER_URL_BASE}?text={media_type}+{millis}"


def format_record_date(now: datetime) -> str:
    """US short date without zero padding, e.g. 7/4/2025."""
    return f"{now.month}/{now.day}/{now.year}"


@dataclass(frozen=True)
class MediaUploadRequest:
    """
    A validated upload notification.

    Frozen because a request is a value: once it passes validation
    nothing downstream should be able to change it. Values are opaque:
    any non-empty JSON value is kept as given, numbers included.
    """
    user_id: Any
    media_type: Any
    video_length: Any = None

    def __post_init__(self) -> None:
        if not self.user_id or not self.media_type:
            raise MediaValidationError("User ID and media type are required.")

    @property
    def needs_deferred_processing(self) -> bool:
        """Only videos with a known length go through simulated processing."""
        return (
            self.media_type == VIDEO_TYPE
            and bool(self.video_length)
            and self.video_length != NO_VIDEO_LENGTH
        )


@dataclass
class MediaRecord:
    """
    The stored description of one upload.

    processing_status moves queued -> processing for <length> -> complete
    and never goes back.
    """
    user_id: Any
    media_type: Any
    url: str
    date: str
    processed: bool = False
    processing_status: str = STATUS_QUEUED

    @classmethod
    def from_request(
        cls,
        request: MediaUploadRequest,
        now: Optional[datetime] = None,
    ) -> "MediaRecord":
        """Initial, queued record for a request."""
        now = now or datetime.now()
        return cls(
            user_id=request.user_id,
            media_type=request.media_type,
            url=build_placeholder_url(request.media_type, now),
            date=format_record_date(now),
        )

    def to_document(self) -> dict[str, Any]:
        """Document body in the store's field names."""
        return {
            "userId": self.user_id,
            "type": self.media_type,
            "url": self.url,
            "date": self.date,
            "processed": self.processed,
            "processingStatus": self.processing_status,
        }

    def mark_processing(self, video_length: Any) -> None:
        self.processing_status = processing_status_for(video_length)

    def mark_complete(self) -> None:
        self.processed = True
        self.processing_status = STATUS_COMPLETE

    @property
    def is_complete(self) -> bool:
        return self.processed and self.processing_status == STATUS_COMPLETE


@dataclass(frozen=True)
class SubmitOutcome:
    """
    What the intake handler tells its caller.

    Carries no record id: callers cannot correlate the later
    completion with anything but their original request.
    """
    deferred: bool
    message: str = field(default="Media upload request received and being processed.")
