"""Categories API endpoints."""

from dataclasses import asdict
from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException

from olxscraper.core.exceptions import OLXScraperException
from olxscraper.schemas import CategoryResponse, ErrorDetail
from olxscraper.scrapers.scraper_service import OLXService, get_olx_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(service: OLXService = Depends(get_olx_service)):
    """List the top-level OLX categories shown on the landing page."""
    try:
        categories = await service.fetch_categories()
    except OLXScraperException as e:
        logger.error("categories_failed", error=e.message)
        raise HTTPException(
            status_code=500,
            detail=ErrorDetail(error="Failed to fetch categories", details=e.message).model_dump(),
        )
    return [CategoryResponse.model_validate(asdict(c)) for c in categories]
