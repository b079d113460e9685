"""Offer detail API endpoints."""

from dataclasses import asdict
from typing import Awaitable

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from olxscraper.config import settings
from olxscraper.core.exceptions import OLXScraperException, RetrievalError
from olxscraper.schemas import (
    ErrorDetail,
    ProductDescriptionResponse,
    ProductDetailResponse,
    ProductPhotosResponse,
    ProductPriceResponse,
    ProductSellerResponse,
)
from olxscraper.scrapers.base import ProductDetail
from olxscraper.scrapers.scraper_service import OLXService, get_olx_service

logger = structlog.get_logger(__name__)

router = APIRouter()

NOT_FOUND = "Product not found"


async def resolve_product(lookup: Awaitable[ProductDetail], ref: str, failure: str) -> ProductDetail:
    """Await an offer lookup, translating not-found and retrieval failures to HTTP errors."""
    try:
        product = await lookup
    except OLXScraperException as e:
        # Removed or unknown ads answer 404 upstream
        if isinstance(e, RetrievalError) and e.status_code == 404:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        logger.error("product_fetch_failed", product=ref, error=e.message)
        raise HTTPException(
            status_code=500,
            detail=ErrorDetail(error=failure, details=e.message).model_dump(),
        )

    if not product.found:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return product


async def load_product(product_id: str, service: OLXService, failure: str) -> ProductDetail:
    return await resolve_product(service.fetch_product_detail(product_id), product_id, failure)


@router.get("", response_model=ProductDetailResponse)
async def get_product_by_url(
    url: str = Query(..., description="Offer page URL on the marketplace"),
    service: OLXService = Depends(get_olx_service),
):
    """Get offer details by scraping its page (embedded state, else markup)."""
    if not url.startswith(f"{settings.BASE_URL}/"):
        raise HTTPException(status_code=400, detail=f"URL must start with {settings.BASE_URL}/")
    product = await resolve_product(service.fetch_product_page(url), url, "Failed to fetch product page")
    return ProductDetailResponse.model_validate(asdict(product))


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: str, service: OLXService = Depends(get_olx_service)):
    """Get full offer details by OLX ad id (numeric, e.g. 1052407977)."""
    product = await load_product(product_id, service, "Failed to fetch product details")
    return ProductDetailResponse.model_validate(asdict(product))


@router.get("/{product_id}/photos", response_model=ProductPhotosResponse)
async def get_product_photos(product_id: str, service: OLXService = Depends(get_olx_service)):
    """Get full-resolution photo URLs of an offer."""
    product = await load_product(product_id, service, "Failed to fetch product photos")
    return ProductPhotosResponse(id=product.id, photos=product.photos)


@router.get("/{product_id}/price", response_model=ProductPriceResponse)
async def get_product_price(product_id: str, service: OLXService = Depends(get_olx_service)):
    """Get price and negotiability of an offer."""
    product = await load_product(product_id, service, "Failed to fetch product price")
    return ProductPriceResponse(id=product.id, price=product.price, negotiable=product.negotiable)


@router.get("/{product_id}/seller", response_model=ProductSellerResponse)
async def get_product_seller(product_id: str, service: OLXService = Depends(get_olx_service)):
    """Get seller name and member-since date of an offer."""
    product = await load_product(product_id, service, "Failed to fetch seller info")
    return ProductSellerResponse.model_validate({"id": product.id, "seller": asdict(product.seller)})


@router.get("/{product_id}/description", response_model=ProductDescriptionResponse)
async def get_product_description(product_id: str, service: OLXService = Depends(get_olx_service)):
    """Get description text and listing parameters of an offer."""
    product = await load_product(product_id, service, "Failed to fetch product description")
    return ProductDescriptionResponse(
        id=product.id,
        description=product.description,
        parameters=product.parameters,
    )
