"""Scraper system for the OLX marketplace.

This package provides:
- Normalized record types shared by all parsers
- A paced Fetcher with headless-browser escalation
- Search, offer detail and category parsers
- The multi-page search aggregator and the caller-facing service
"""

from .base import (
    Category,
    FetchOutcome,
    FetchStatus,
    Listing,
    ProductDetail,
    SearchCollection,
    SearchPage,
    Seller,
)
from .aggregator import SearchAggregator, SearchFilters
from .fetcher import Fetcher
from .scraper_service import OLXService, get_olx_service

__all__ = [
    # Records
    "Category",
    "FetchOutcome",
    "FetchStatus",
    "Listing",
    "ProductDetail",
    "SearchCollection",
    "SearchPage",
    "Seller",
    # Retrieval and aggregation
    "Fetcher",
    "SearchAggregator",
    "SearchFilters",
    # Service
    "OLXService",
    "get_olx_service",
]
