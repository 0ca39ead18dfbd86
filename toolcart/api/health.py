"""Health check endpoints."""

from fastapi import APIRouter

from toolcart.api.schemas import HealthResponse
from toolcart.infrastructure.config import settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="toolcart-api",
        version=settings.api_version,
    )
