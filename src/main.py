"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn src.main:app --reload

For production:
    python -m src.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .api.routes import health, media
from .config.settings import Settings, get_settings
from .infrastructure.firestore.client import FirestoreConfig, create_media_repository
from .infrastructure.tasks.scheduler import DeferredTaskScheduler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Root logging setup; LOG_LEVEL is a level name such as INFO or debug."""
    logging.basicConfig(format=LOG_FORMAT, level=settings.log_level.upper())


configure_logging(get_settings())

logger = logging.getLogger(__name__)

ROOT_MESSAGE = "OBS CMS Backend API is running!"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup validates the service account and creates the process-wide
    repository and scheduler. A missing credential raises
    ConfigurationError, which stops the server from coming up.
    Shutdown cancels deferred tasks that have not fired yet.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Media intake API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {"firestore": settings.firestore_mock_mode},
        }
    )

    try:
        settings.ensure_configured()
    except Exception:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": settings.validate_required_fields()}
        )
        raise

    if settings.firestore_mock_mode:
        repository = create_media_repository(mock_mode=True, app_id=settings.app_id)
    else:
        repository = create_media_repository(
            config=FirestoreConfig(
                service_account_info=settings.service_account_info,
                app_id=settings.app_id,
            )
        )

    app.state.media_repository = repository
    app.state.task_scheduler = DeferredTaskScheduler(
        max_attempts=settings.deferred_task_max_attempts,
        retry_delay_seconds=settings.deferred_task_retry_delay_seconds,
    )

    yield

    cancelled = await app.state.task_scheduler.shutdown()
    logger.info(
        "Media intake API shutting down",
        extra={"cancelled_tasks": [h.name for h in cancelled]}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Tests pass their own Settings; production uses the cached
    environment-backed instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Records media upload notifications in Firestore.

        Videos sent with a length are stored as "processing for <length>"
        and marked complete after a short simulated processing delay.
        Everything else is stored as complete straight away.
        """,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        media.router,
        prefix="/api",
        tags=["Media"],
    )

    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    async def root():
        """Liveness probe with a fixed text body."""
        return ROOT_MESSAGE

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies are client errors, reported in the same shape as missing fields."""
        logger.warning(
            "Invalid request body",
            extra={"path": request.url.path, "errors": exc.errors()}
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body."},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Log the full error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
