"""Health check schemas."""

from olxscraper.schemas.common import CamelModel


class HealthCheckResponse(CamelModel):
    """Health check response schema."""

    status: str
    environment: str
    playwright_enabled: bool
