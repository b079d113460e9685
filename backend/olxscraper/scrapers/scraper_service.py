"""Caller-facing scraper operations.

This service wires the shared Fetcher to the parsers and the aggregator.
It is the only entry point the HTTP layer uses.
"""

import threading
from typing import List, Optional

import structlog

from olxscraper.config import settings
from olxscraper.scrapers.aggregator import SearchAggregator, SearchFilters, build_search_base_url
from olxscraper.scrapers.base import Category, ProductDetail, SearchCollection
from olxscraper.scrapers.category_parser import parse_categories
from olxscraper.scrapers.fetcher import Fetcher
from olxscraper.scrapers.product_parser import (
    parse_product_api_response,
    parse_product_from_markup,
    parse_product_from_state,
)
from olxscraper.scrapers.state import AD_SHAPES, extract_embedded_state

logger = structlog.get_logger(__name__)


class OLXService:
    """Search, offer detail and category operations against OLX."""

    def __init__(self, fetcher: Optional[Fetcher] = None):
        """Initialize service.

        Args:
            fetcher: Shared fetcher; one is created when omitted
        """
        self.fetcher = fetcher or Fetcher()
        self.aggregator = SearchAggregator(self.fetcher)
        self.logger = logger.bind(service="olx_service")

    async def search_listings(
        self,
        query: str,
        limit: Optional[int] = None,
        filters: Optional[SearchFilters] = None,
    ) -> SearchCollection:
        """Search listings, paginating until limit results are collected.

        Args:
            query: Free-text search query
            limit: Maximum number of results (at least 1)
            filters: Price, delivery, condition and category filters

        Returns:
            SearchCollection with the page-1 total count and up to limit results
        """
        limit = max(1, limit or settings.DEFAULT_SEARCH_LIMIT)
        filters = filters or SearchFilters()
        base_url = build_search_base_url(query, filters.category_slug)

        self.logger.info("searching_listings", query=query, limit=limit, base_url=base_url)
        collection = await self.aggregator.collect(base_url, filters, limit)
        self.logger.info(
            "search_complete",
            query=query,
            total_count=collection.total_count,
            returned=len(collection.results),
        )
        return collection

    async def fetch_product_detail(self, offer_id: str) -> ProductDetail:
        """Fetch an offer through the internal offers API.

        Returns:
            ProductDetail; an empty title means the offer was not found
        """
        api_url = f"{settings.BASE_URL}/api/v1/offers/{offer_id}/"
        body = await self.fetcher.retrieve(api_url)
        detail = parse_product_api_response(body)
        if not detail.found:
            self.logger.warning("product_not_found", offer_id=offer_id)
        return detail

    async def fetch_product_page(self, url: str) -> ProductDetail:
        """Fetch an offer page and parse it.

        The embedded state is used when the page carries an ad object,
        otherwise the rendered markup is parsed.
        """
        markup = await self.fetcher.retrieve(url)
        ad = extract_embedded_state(markup, AD_SHAPES)
        if isinstance(ad, dict):
            return parse_product_from_state(ad, url)
        self.logger.info("product_state_missing", url=url)
        return parse_product_from_markup(markup, url)

    async def fetch_categories(self) -> List[Category]:
        """Fetch the top-level categories from the landing page."""
        markup = await self.fetcher.retrieve(f"{settings.BASE_URL}/")
        categories = parse_categories(markup)
        self.logger.info("categories_fetched", count=len(categories))
        return categories

    async def aclose(self) -> None:
        await self.fetcher.aclose()


# Singleton instance
_olx_service: Optional[OLXService] = None
_olx_service_lock = threading.Lock()


async def get_olx_service() -> OLXService:
    """Get the process-wide OLXService (one pacing clock, one cookie jar).

    Used as a FastAPI dependency. Being async it runs on the event loop,
    and the lock covers callers driving their own loops from other threads.
    """
    global _olx_service
    if _olx_service is None:
        with _olx_service_lock:
            if _olx_service is None:
                _olx_service = OLXService()
    return _olx_service


async def close_olx_service() -> None:
    """Close and forget the process-wide service."""
    global _olx_service
    if _olx_service is not None:
        await _olx_service.aclose()
        _olx_service = None
