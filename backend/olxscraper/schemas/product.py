"""Offer detail Pydantic schemas, full and partial views."""

from typing import Dict, List

from olxscraper.schemas.common import CamelModel


class SellerResponse(CamelModel):
    name: str
    member_since: str


class ProductDetailResponse(CamelModel):
    """Full offer detail."""

    id: str
    title: str
    description: str
    price: str
    negotiable: bool
    parameters: Dict[str, str] = {}
    photos: List[str] = []
    location: str
    posted_at: str
    seller: SellerResponse
    url: str


class ProductPhotosResponse(CamelModel):
    id: str
    photos: List[str] = []


class ProductPriceResponse(CamelModel):
    id: str
    price: str
    negotiable: bool


class ProductSellerResponse(CamelModel):
    id: str
    seller: SellerResponse


class ProductDescriptionResponse(CamelModel):
    id: str
    description: str
    parameters: Dict[str, str] = {}
