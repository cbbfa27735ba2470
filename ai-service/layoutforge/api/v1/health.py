"""
Health checks for the layout and code generation service.
"""
from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict
from datetime import datetime, timezone
import time

from layoutforge.config import settings
from layoutforge.models.schemas.component_catalog import ALLOWED_COMPONENT_KEYS
from layoutforge.services.generation.archetype_resolver import LAYOUT_ARCHETYPES
from layoutforge.services.generation.component_mapping import COMPONENT_MAPPING

router = APIRouter()

# Track service start time
SERVICE_START_TIME = time.time()


class HealthResponse(BaseModel):
    """Simple health check response model"""
    status: str
    service: str
    version: str
    environment: str
    backend_configured: bool
    llm_model: str
    component_keys: int
    archetypes: int
    mapped_kinds: int
    uptime_seconds: float
    timestamp: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "service": "LayoutForge Service",
                "version": "0.1.0",
                "environment": "development",
                "backend_configured": True,
                "llm_model": "gemini-2.5-flash",
                "component_keys": 9,
                "archetypes": 9,
                "mapped_kinds": 5,
                "uptime_seconds": 12.5,
                "timestamp": "2026-01-01T12:00:00Z"
            }
        }
    )


class LivenessResponse(BaseModel):
    """Liveness probe response"""
    status: str
    timestamp: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Service health check",
    description="Service metadata, backend configuration and the size of the static tables"
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Test mode works without a backend key, so a missing key is reported
    but does not make the service unhealthy.
    """
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        backend_configured=bool(settings.llm_api_key),
        llm_model=settings.llm_model,
        component_keys=len(ALLOWED_COMPONENT_KEYS),
        archetypes=len(LAYOUT_ARCHETYPES),
        mapped_kinds=len(COMPONENT_MAPPING),
        uptime_seconds=round(time.time() - SERVICE_START_TIME, 2),
        timestamp=datetime.now(timezone.utc)
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Liveness probe",
    description="Process liveness only. No dependency checks."
)
async def liveness_check() -> LivenessResponse:
    # No logging in liveness probe
    return LivenessResponse(
        status="alive",
        timestamp=datetime.now(timezone.utc).isoformat()
    )
