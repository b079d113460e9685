"""Normalized records produced by the scraper layer.

Every parser returns these dataclasses regardless of whether the data came
from the embedded state payload, the rendered markup or the internal API.
All of them are built per request and discarded after serialization.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass
class Listing:
    """One search result card."""

    id: str  # Empty for some promoted entries
    title: str
    price: str  # Display string, never parsed
    location: str  # "City, Region"
    date: str
    has_delivery: bool
    url: str


@dataclass
class SearchPage:
    """Results of one search results page."""

    total_count: int  # Only read on page 1, 0 otherwise
    page: int  # 1-based
    results: List[Listing] = field(default_factory=list)


@dataclass
class SearchCollection:
    """Results accumulated across pages, truncated to the requested limit."""

    total_count: int
    limit: int
    results: List[Listing] = field(default_factory=list)


@dataclass
class Seller:
    name: str = ""
    member_since: str = ""


@dataclass
class ProductDetail:
    """Full offer record.

    A missing offer is signalled by an empty title, so callers always get
    a complete object back.
    """

    id: str = ""
    title: str = ""
    description: str = ""
    price: str = ""
    negotiable: bool = False
    parameters: Dict[str, str] = field(default_factory=dict)
    photos: List[str] = field(default_factory=list)
    location: str = ""
    posted_at: str = ""
    seller: Seller = field(default_factory=Seller)
    url: str = ""

    @property
    def found(self) -> bool:
        return bool(self.title)


@dataclass
class Category:
    name: str
    slug: str  # Path without leading/trailing slash
    url: str


class FetchStatus(str, Enum):
    """Terminal states of a single retrieval attempt."""

    DELIVERED = "delivered"
    BLOCKED = "blocked"
    FAILED = "failed"


@dataclass
class FetchOutcome:
    """Result of one retrieval attempt (direct request or rendering)."""

    status: FetchStatus
    content: str = ""
    reason: str = ""
    status_code: Optional[int] = None

    @classmethod
    def delivered(cls, content: str, status_code: Optional[int] = None) -> "FetchOutcome":
        return cls(FetchStatus.DELIVERED, content=content, status_code=status_code)

    @classmethod
    def blocked(cls, reason: str, status_code: Optional[int] = None) -> "FetchOutcome":
        return cls(FetchStatus.BLOCKED, reason=reason, status_code=status_code)

    @classmethod
    def failed(cls, reason: str, status_code: Optional[int] = None) -> "FetchOutcome":
        return cls(FetchStatus.FAILED, reason=reason, status_code=status_code)
