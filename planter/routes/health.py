"""
Health check route for Planter backend.

This endpoint is PUBLIC (no authentication required) and provides a simple
status check for load balancers, monitoring, and deployment verification.

Endpoint flow:
- Step 1: Auth → SKIPPED (explicitly public endpoint)
- Step 2: Parse/Validate → No request body needed
- Step 3: Domain Filter → N/A
- Step 4: Call Service → reads configuration only
- Step 5: Map to ResponseModel → HealthResponse
- Step 6: Persistence → N/A
"""

from fastapi import APIRouter

from planter.config import settings
from planter.schemas.health import HealthResponse
from planter.utils.logging import get_logger

logger = get_logger(__name__)

# Mounted at root level in main.py
router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint (no authentication required). "
        "Reports whether recommendations use the completion backend or the local scorer."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "planter-backend",
            "completion": "external"
        }
    """
    logger.debug("Health check endpoint called")

    completion = "external" if settings.completion_configured() else "local"
    return HealthResponse(status="ok", completion=completion)
