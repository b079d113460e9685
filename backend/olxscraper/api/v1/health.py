"""Health check endpoint."""

from fastapi import APIRouter

from olxscraper.config import settings
from olxscraper.schemas import HealthCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Return service status. Does not contact the marketplace."""
    return HealthCheckResponse(
        status="ok",
        environment=settings.ENVIRONMENT,
        playwright_enabled=settings.PLAYWRIGHT_ENABLED,
    )
