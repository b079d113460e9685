"""OLX scraper API -- FastAPI application entry point.

Run with: uvicorn olxscraper.main:app --port 3000
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from olxscraper import __version__
from olxscraper.api.v1.router import api_v1_router
from olxscraper.config import settings
from olxscraper.core.logging_config import configure_logging
from olxscraper.scrapers.scraper_service import close_olx_service

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info(
        "api_starting",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        base_url=settings.BASE_URL,
        playwright_enabled=settings.PLAYWRIGHT_ENABLED,
    )

    yield

    # Closes the shared HTTP client and its cookie jar
    await close_olx_service()
    logger.info("api_stopped")


app = FastAPI(
    title="OLX.pl Scraper API",
    description="Unofficial API for searching and retrieving listings from OLX.pl",
    version=__version__,
    docs_url="/olx/v1/docs" if settings.DEBUG else None,
    redoc_url=None,
    openapi_url="/olx/v1/docs.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.include_router(api_v1_router, prefix="/olx/v1")


@app.get("/", include_in_schema=False)
async def root():
    """Send visitors to the API docs (or the health check outside debug)."""
    target = "/olx/v1/docs" if settings.DEBUG else "/olx/v1/health"
    return RedirectResponse(url=target)
