"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Resource lifecycle is owned by the application lifespan

Settings, the repository and the scheduler are created once at startup
and stored on app.state; the functions here only hand them out.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.media.intake import MediaIntakeService, MediaRepository
from ..infrastructure.tasks.scheduler import DeferredTaskScheduler


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_media_repository(request: Request) -> MediaRepository:
    """Process-wide media repository created in the lifespan."""
    return request.app.state.media_repository


def get_task_scheduler(request: Request) -> DeferredTaskScheduler:
    """Process-wide deferred task scheduler created in the lifespan."""
    return request.app.state.task_scheduler


def get_intake_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
    repository: Annotated[MediaRepository, Depends(get_media_repository)],
    scheduler: Annotated[DeferredTaskScheduler, Depends(get_task_scheduler)],
) -> MediaIntakeService:
    """
    Provide the intake service.

    The service is stateless, so we create a new instance per request
    around the shared repository and scheduler.
    """
    return MediaIntakeService(
        repository=repository,
        scheduler=scheduler,
        processing_delay_seconds=settings.media_processing_delay_seconds,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
TaskSchedulerDep = Annotated[DeferredTaskScheduler, Depends(get_task_scheduler)]
MediaIntakeServiceDep = Annotated[MediaIntakeService, Depends(get_intake_service)]
