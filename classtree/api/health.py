"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    from classtree.infrastructure.config import settings

    return HealthResponse(
        status="healthy",
        service="classtree-api",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status; 503 when the database does not answer.
    """
    try:
        await request.app.state.database.ping()
    except Exception as e:
        logger.warning("Database not reachable", error=str(e))
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return JSONResponse(content={"status": "ready"})
