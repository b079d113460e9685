"""Search API endpoints."""

from dataclasses import asdict
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from olxscraper.config import settings
from olxscraper.core.exceptions import OLXScraperException
from olxscraper.schemas import ErrorDetail, SearchResponse
from olxscraper.scrapers.aggregator import SearchFilters
from olxscraper.scrapers.scraper_service import OLXService, get_olx_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/{query}", response_model=SearchResponse)
async def search_listings(
    query: str,
    limit: Optional[int] = Query(
        None, ge=1, description="Max results to return (auto-paginates); DEFAULT_SEARCH_LIMIT when omitted"
    ),
    min_price: Optional[int] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[int] = Query(None, ge=0, description="Maximum price filter"),
    has_delivery: Optional[bool] = Query(None, description="Only listings with delivery"),
    condition: Optional[str] = Query(None, pattern="^(new|used)$", description="Item condition"),
    category: Optional[str] = Query(None, description="Category slug (e.g. elektronika)"),
    service: OLXService = Depends(get_olx_service),
):
    """Search OLX listings.

    Fetches result pages one after another until `limit` listings are
    collected or a page comes back empty. `totalCount` is the count shown
    on the first results page.
    """
    if not query.strip():
        raise HTTPException(status_code=400, detail="Search query cannot be empty")

    filters = SearchFilters(
        min_price=min_price,
        max_price=max_price,
        has_delivery=has_delivery,
        condition=condition,
        category_slug=category,
    )

    try:
        collection = await service.search_listings(
            query,
            limit=limit or settings.DEFAULT_SEARCH_LIMIT,
            filters=filters,
        )
    except OLXScraperException as e:
        logger.error("search_failed", query=query, error=e.message)
        raise HTTPException(
            status_code=500,
            detail=ErrorDetail(error="Failed to fetch search results", details=e.message).model_dump(),
        )

    return SearchResponse.model_validate(asdict(collection))
