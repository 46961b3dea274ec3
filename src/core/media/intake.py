"""
Upload intake logic.

This module turns a validated upload notification into a stored record
and, for videos with a known length, schedules the simulated processing
that later marks the record complete. It's framework-agnostic and
doesn't know about HTTP, Firestore, or asyncio tasks.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Protocol

from .models import (
    COMPLETION_FIELDS,
    MediaRecord,
    MediaUploadRequest,
    SubmitOutcome,
)

logger = logging.getLogger(__name__)

DEFAULT_PROCESSING_DELAY_SECONDS = 5.0


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class MediaRepository(Protocol):
    """
    Interface for the document store holding media records.

    Implementations raise their own storage error when a write fails;
    the intake service lets it propagate.
    """

    async def add(self, record: MediaRecord) -> str:
        """Persist a new record and return its store-assigned id."""
        ...

    async def update(self, media_id: str, fields: dict[str, Any]) -> None:
        """Overwrite the given fields of an existing record."""
        ...


class TaskHandle(Protocol):
    """What the intake service gets back for a scheduled task."""

    name: str

    def cancel(self) -> bool:
        ...


class TaskScheduler(Protocol):
    """
    Interface for running a one-shot action after a delay.

    The scheduler owns retries and failure reporting. The intake
    service only submits work and never awaits it.
    """

    def submit(
        self,
        name: str,
        delay_seconds: float,
        action: Callable[[], Awaitable[None]],
    ) -> TaskHandle:
        ...


# ---------------------------------------------------------------------------
# Intake Service
# ---------------------------------------------------------------------------

class MediaIntakeService:
    """
    Records upload notifications and drives their processing status.

    Stateless between calls: every submit builds its own record, so
    concurrent requests share nothing but the repository and scheduler.
    """

    def __init__(
        self,
        repository: MediaRepository,
        scheduler: TaskScheduler,
        processing_delay_seconds: float = DEFAULT_PROCESSING_DELAY_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repository = repository
        self._scheduler = scheduler
        self._processing_delay_seconds = processing_delay_seconds
        self._clock = clock

    async def submit(self, request: MediaUploadRequest) -> SubmitOutcome:
        """
        Store the record for an upload.

        Videos with a length are written as "processing for <length>" and
        a completion task is scheduled against the new record's id.
        Everything else is written straight away as complete. Returns as
        soon as the first write succeeds.
        """
        record = MediaRecord.from_request(request, now=self._clock())

        if request.needs_deferred_processing:
            record.mark_processing(request.video_length)
            media_id = await self._repository.add(record)

            handle = self._scheduler.submit(
                name=f"complete-media-{media_id}",
                delay_seconds=self._processing_delay_seconds,
                action=lambda: self.complete(media_id, user_id=request.user_id),
            )

            logger.info(
                "Video queued for processing",
                extra={
                    "user_id": request.user_id,
                    "media_id": media_id,
                    "video_length": request.video_length,
                    "task": handle.name,
                }
            )
            return SubmitOutcome(deferred=True)

        record.mark_complete()
        await self._repository.add(record)

        logger.info(
            "Media saved",
            extra={"user_id": request.user_id, "media_type": request.media_type}
        )
        return SubmitOutcome(deferred=False)

    async def complete(self, media_id: str, user_id: Any = None) -> None:
        """Mark a queued record as processed. Touches no other field."""
        await self._repository.update(media_id, dict(COMPLETION_FIELDS))

        logger.info(
            "Video processed",
            extra={"user_id": user_id, "media_id": media_id}
        )
