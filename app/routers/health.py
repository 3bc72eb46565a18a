# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Unauthenticated probes for load balancers and uptime monitors:
# - /health        the process answers and reports its version
# - /health/ready  the song store can be reached (503 otherwise)
# - /health/live   the event loop is responsive
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.config import settings
from app.dependencies import StoreDep
from app.exceptions import ChantsException

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """Whether requests touching songs can currently succeed."""
    status: str  # "ready" or "degraded"
    storage_backend: str
    database: str
    timestamp: datetime


class LivenessResponse(BaseModel):
    status: str
    timestamp: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(store: StoreDep, response: Response):
    """
    Ping the configured store.

    Responds 503 with status "degraded" when the store cannot be reached,
    so orchestrators stop routing traffic here.
    """
    try:
        store.ping()
        database = "healthy"
    except ChantsException as e:
        logger.warning(f"Readiness check failed: {e.message}")
        database = f"unhealthy: {e.code}"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ready" if database == "healthy" else "degraded",
        storage_backend=settings.STORAGE_BACKEND,
        database=database,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=_now())
