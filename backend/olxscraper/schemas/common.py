"""Common Pydantic schemas used across the API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response base: snake_case attributes serialized as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorDetail(BaseModel):
    """Body of a failed scraper call, returned as the HTTPException detail."""

    error: str
    details: str
