"""
Health check routes.

These endpoints are PUBLIC (no authentication required) and give load
balancers and deploy checks a cheap liveness check. The same handler is
registered on the web app (GET /health) and on the API app (GET /api/health).
"""

from fastapi import APIRouter

from bizdesk.schemas.health import HealthResponse
from bizdesk.utils.logging import get_logger

logger = get_logger(__name__)

# No prefix; included by both the web app and the API app
router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint (no authentication required). "
        "Returns a simple status indicator for monitoring and load balancing."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok"
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
