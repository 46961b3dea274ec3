"""
Health check endpoints.

We provide two endpoints:
- /health: Basic liveness check (is the process running?)
- /health/ready: Readiness check (can we serve traffic?)

Readiness also reports on deferred processing. A completion update that
failed every attempt leaves a record stuck in "processing for ...", and
this is the one place that failure becomes visible outside the logs.
"""

import logging
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from ..dependencies import SettingsDep, TaskSchedulerDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """
    Health check response.

    Standardized format makes it easy for monitoring tools to parse.
    """
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok" or "error"
    error: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(settings: SettingsDep, scheduler: TaskSchedulerDep) -> HealthResponse:
    """Liveness check - fast, no external calls."""
    return HealthResponse(
        status="ok",
        version=settings.api_version,
        details={
            "mock_mode": {"firestore": settings.firestore_mock_mode},
            "pending_tasks": scheduler.pending_count,
        }
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic and no deferred processing has failed.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(
    response: Response,
    settings: SettingsDep,
    scheduler: TaskSchedulerDep,
) -> ReadinessResponse:
    """
    Readiness check - configuration and deferred processing.

    Returns 503 if any check fails.
    """
    checks: list[ReadinessCheck] = []

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        checks.append(ReadinessCheck(
            name="configuration",
            status="error",
            error=f"Missing required fields: {', '.join(missing_fields)}"
        ))
    else:
        checks.append(ReadinessCheck(name="configuration", status="ok"))

    checks.append(ReadinessCheck(
        name="document_store",
        status="ok",
        error="mock mode" if settings.firestore_mock_mode else None,
    ))

    failures = scheduler.recent_failures
    if failures:
        checks.append(ReadinessCheck(
            name="deferred_tasks",
            status="error",
            error=f"{len(failures)} failed: " + ", ".join(
                f"{h.name} ({h.error})" for h in failures[-5:]
            ),
        ))
    else:
        checks.append(ReadinessCheck(name="deferred_tasks", status="ok"))

    all_ok = all(c.status == "ok" for c in checks)
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Readiness check failed",
            extra={
                "checks": [
                    {"name": c.name, "status": c.status, "error": c.error}
                    for c in checks
                ]
            }
        )

    return ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=settings.api_version,
        checks=checks,
    )
