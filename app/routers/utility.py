# =============================================================================
# app/routers/utility.py - Utility Endpoints
# =============================================================================
# Health checks for monitoring and load balancers, plus robots.txt.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from app.dependencies import SessionStoreDep
from lib.session_store import SessionStoreError

router = APIRouter()

ROBOTS_TXT = "User-agent: *\nDisallow: /account\nDisallow: /auth/\n"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    database: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=request.app.state.config.environment,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(store: SessionStoreDep):
    """
    Readiness check endpoint.

    Reports whether the session store answers.
    """
    try:
        await store.ping()
        database = "healthy"
    except SessionStoreError as e:
        database = f"unhealthy: {e.message[:50]}"

    return ReadinessResponse(
        status="ready" if database == "healthy" else "degraded",
        database=database,
        timestamp=_now(),
    )


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots():
    return ROBOTS_TXT
