"""Category Pydantic schemas."""

from olxscraper.schemas.common import CamelModel


class CategoryResponse(CamelModel):
    """Top-level marketplace category."""

    name: str
    slug: str
    url: str
