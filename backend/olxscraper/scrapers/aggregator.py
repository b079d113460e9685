"""Multi-page search aggregation."""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import quote, urlencode

import structlog

from olxscraper.config import settings
from olxscraper.scrapers.base import Listing, SearchCollection
from olxscraper.scrapers.fetcher import Fetcher
from olxscraper.scrapers.search_parser import parse_search_page

logger = structlog.get_logger(__name__)

CONDITIONS = ("new", "used")


@dataclass
class SearchFilters:
    """Optional search filters; only supplied ones reach the query string."""

    min_price: Optional[int] = None
    max_price: Optional[int] = None
    has_delivery: Optional[bool] = None
    condition: Optional[str] = None  # "new" or "used"
    category_slug: Optional[str] = None

    def __post_init__(self):
        if self.condition is not None and self.condition not in CONDITIONS:
            raise ValueError(f"condition must be one of {CONDITIONS}, got {self.condition!r}")

    def to_query_params(self) -> List[Tuple[str, str]]:
        """Marketplace query parameters for the supplied filters."""
        params: List[Tuple[str, str]] = []
        if self.min_price is not None:
            params.append(("search[filter_float_price:from]", str(self.min_price)))
        if self.max_price is not None:
            params.append(("search[filter_float_price:to]", str(self.max_price)))
        if self.has_delivery:
            params.append(("search[filter_enum_delivery:0]", "courier"))
        if self.condition:
            params.append(("search[filter_enum_state:0]", self.condition))
        return params


def query_slug(query: str) -> str:
    """Search text as a path segment: whitespace runs become single hyphens."""
    return quote(re.sub(r"\s+", "-", query.strip()), safe="-")


def build_search_base_url(query: str, category_slug: Optional[str] = None) -> str:
    """Base URL of a search: {category}/q-{slug}/ or oferty/q-{slug}/."""
    prefix = category_slug.strip("/") if category_slug else "oferty"
    return f"{settings.BASE_URL}/{prefix}/q-{query_slug(query)}/"


def build_page_url(base_url: str, filters: Optional[SearchFilters], page: int) -> str:
    """Combine base URL, filter parameters and (after page 1) the page number."""
    params = filters.to_query_params() if filters else []
    if page > 1:
        params.append(("page", str(page)))
    if not params:
        return base_url
    return f"{base_url}?{urlencode(params, safe='[]:')}"


class SearchAggregator:
    """Drives fetch + parse across result pages until the limit is met."""

    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher
        self.logger = logger.bind(component="aggregator")

    async def collect(
        self,
        base_url: str,
        filters: Optional[SearchFilters],
        limit: int,
    ) -> SearchCollection:
        """Collect up to limit listings starting at page 1.

        Stops as soon as a page comes back empty, so an inflated total count
        upstream cannot keep the loop going. At most one page beyond what is
        needed is fetched, and the results are truncated to limit.

        Raises:
            RetrievalError: Any page retrieval failure aborts the collection
        """
        collected: List[Listing] = []
        total_count = 0
        page = 1

        while len(collected) < limit:
            url = build_page_url(base_url, filters, page)
            markup = await self.fetcher.retrieve(url)
            parsed = parse_search_page(markup, page)

            if page == 1:
                total_count = parsed.total_count
            if not parsed.results:
                self.logger.info("search_exhausted", page=page, collected=len(collected))
                break

            collected.extend(parsed.results)
            self.logger.info("search_page_collected", page=page, count=len(parsed.results))
            page += 1

        return SearchCollection(total_count=total_count, limit=limit, results=collected[:limit])
