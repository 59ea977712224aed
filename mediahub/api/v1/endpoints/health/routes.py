"""Health check API routes."""

import os
import time
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.api.dependencies import get_database_session
from mediahub.config import get_settings
from .schemas import DetailedHealthResponse, HealthResponse

router = APIRouter(prefix="/health", tags=["Health Check"])

_STARTED_AT = time.monotonic()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Simple health check endpoint.",
)
async def basic_health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns minimal health status information without dependency checks.
    Useful for load balancer health checks.
    """
    return HealthResponse(status="healthy", timestamp=_timestamp())


@router.get(
    "/detailed",
    response_model=DetailedHealthResponse,
    summary="Detailed health check",
    description="Check the health status of the application and its dependencies.",
    responses={
        200: {"description": "Service is healthy"},
        503: {"model": DetailedHealthResponse, "description": "Service is unhealthy"},
    },
)
async def detailed_health_check(
    session: AsyncSession = Depends(get_database_session),
):
    """
    Check database connectivity and that the media directory is writable.

    Responds with 503 when any dependency is unhealthy.
    """
    services = {}
    overall_status = "healthy"

    try:
        await session.execute(text("SELECT 1"))
        services["database"] = "healthy"
    except SQLAlchemyError:
        services["database"] = "unhealthy"
        overall_status = "unhealthy"

    settings = get_settings()
    media_root = settings.media_root
    if os.path.isdir(media_root) and os.access(media_root, os.W_OK):
        services["media_storage"] = "healthy"
    else:
        # Created lazily on first upload
        services["media_storage"] = "not_initialized"

    body = DetailedHealthResponse(
        status=overall_status,
        timestamp=_timestamp(),
        services=services,
        version=settings.app_version,
        uptime=str(timedelta(seconds=int(time.monotonic() - _STARTED_AT))),
    )
    if overall_status != "healthy":
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
