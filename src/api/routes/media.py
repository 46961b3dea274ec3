"""
Media upload notification endpoint.

The frontend calls this after a user picks an image or video. No file
travels with the request: we only record that the upload happened and,
for videos, simulate processing in the background.

The response never waits for that processing. The frontend watches the
Firestore document to see it finish.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ...core.media.models import MediaUploadRequest, MediaValidationError
from ...infrastructure.firestore.client import StorageError
from ..dependencies import MediaIntakeServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class MediaUploadBody(BaseModel):
    """
    JSON body of an upload notification.

    Every field is optional here so that a missing userId or type is
    reported by the domain validation as a 400, not by FastAPI as a 422.
    Values are not coerced to strings: a numeric userId or videoLength
    is stored as the number it was sent as.
    """
    model_config = ConfigDict(populate_by_name=True)

    user_id: Any = Field(None, alias="userId", description="Uploading user")
    media_type: Any = Field(None, alias="type", description="Media type, e.g. image or video")
    video_length: Any = Field(
        None,
        alias="videoLength",
        description="Video length label such as 10s; 'none' skips simulated processing",
    )

    def to_domain(self) -> MediaUploadRequest:
        """Validate into a domain request. Raises MediaValidationError."""
        return MediaUploadRequest(
            user_id=self.user_id or "",
            media_type=self.media_type or "",
            video_length=self.video_length,
        )


class UploadAcceptedResponse(BaseModel):
    """Response once the upload has been recorded."""
    message: str = Field(description="Status message")


class ErrorResponse(BaseModel):
    """Error body shared by 4xx and 5xx responses."""
    error: str = Field(description="What went wrong")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/upload-media",
    response_model=UploadAcceptedResponse,
    status_code=status.HTTP_200_OK,
    summary="Record a media upload",
    description="Store a media record; videos with a length are marked complete after a delay",
    responses={
        400: {"model": ErrorResponse, "description": "userId or type missing"},
        500: {"model": ErrorResponse, "description": "Record could not be stored"},
    },
)
async def upload_media(
    intake: MediaIntakeServiceDep,
    body: Optional[MediaUploadBody] = None,
):
    """
    Record an upload notification.

    Images, and videos without a length, are stored as complete.
    Videos with a length are stored as "processing for <length>" and
    completed by a background task. Either way we answer as soon as the
    first write lands.
    """
    body = body or MediaUploadBody()

    try:
        upload = body.to_domain()
    except MediaValidationError as e:
        logger.warning(
            "Rejected upload notification",
            extra={"user_id": body.user_id, "media_type": body.media_type}
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )

    try:
        outcome = await intake.submit(upload)
    except StorageError as e:
        logger.error(
            "Error handling media upload",
            extra={"user_id": upload.user_id, "error": str(e)}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )

    return UploadAcceptedResponse(message=outcome.message)
