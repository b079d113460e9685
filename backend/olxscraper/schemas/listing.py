"""Search Pydantic schemas."""

from typing import List

from olxscraper.schemas.common import CamelModel


class ListingResponse(CamelModel):
    """One search result."""

    id: str
    title: str
    price: str
    location: str
    date: str
    has_delivery: bool
    url: str


class SearchResponse(CamelModel):
    """Aggregated search results."""

    total_count: int
    limit: int
    results: List[ListingResponse] = []
