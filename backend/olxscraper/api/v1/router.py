"""API v1 router -- aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from olxscraper.api.v1 import categories, health, products, search

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["health"])
api_v1_router.include_router(search.router, prefix="/search", tags=["search"])
api_v1_router.include_router(products.router, prefix="/product", tags=["product"])
api_v1_router.include_router(categories.router, prefix="/categories", tags=["categories"])
