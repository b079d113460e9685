"""Pydantic schemas for the OLX scraper API.

All response models are defined here for easy import.
"""

from olxscraper.schemas.common import CamelModel, ErrorDetail
from olxscraper.schemas.listing import ListingResponse, SearchResponse
from olxscraper.schemas.product import (
    ProductDescriptionResponse,
    ProductDetailResponse,
    ProductPhotosResponse,
    ProductPriceResponse,
    ProductSellerResponse,
    SellerResponse,
)
from olxscraper.schemas.category import CategoryResponse
from olxscraper.schemas.health import HealthCheckResponse

__all__ = [
    # Common
    "CamelModel",
    "ErrorDetail",
    # Search
    "ListingResponse",
    "SearchResponse",
    # Product
    "ProductDetailResponse",
    "ProductPhotosResponse",
    "ProductPriceResponse",
    "ProductSellerResponse",
    "ProductDescriptionResponse",
    "SellerResponse",
    # Category
    "CategoryResponse",
    # Health
    "HealthCheckResponse",
]
