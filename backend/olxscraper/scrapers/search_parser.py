"""Search results page parsing.

Two extraction paths:
1. Embedded state: structured ads with real (not lazy-loaded) image URLs
   and richer delivery flags. Preferred whenever it yields any result.
2. Markup: result cards located by their data-testid attributes, used only
   when the state path yields nothing.
"""

import re
from typing import Any, Dict, List, Optional

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag

from olxscraper.scrapers.base import Listing, SearchPage
from olxscraper.scrapers.state import (
    LISTING_ADS_SHAPES,
    LISTING_TOTAL_SHAPES,
    decode_prerendered_state,
    first_present,
)
from olxscraper.scrapers.utils.normalizer import (
    absolute_url,
    as_dict,
    as_text,
    first_truthy,
    join_location,
)

logger = structlog.get_logger(__name__)

_COUNT_RE = re.compile(r"(\d[\d\s]*)")


def parse_search_page(markup: str, page: int) -> SearchPage:
    """Parse one search results page.

    Args:
        markup: Page HTML
        page: 1-based page number; the total count is only read on page 1

    Returns:
        SearchPage from the embedded state, or from the markup when the
        state yields no results
    """
    from_state = parse_search_state(markup, page)
    if from_state is not None and from_state.results:
        logger.debug("search_page_parsed", source="state", page=page, count=len(from_state.results))
        return from_state

    from_markup = parse_search_markup(markup, page)
    logger.debug("search_page_parsed", source="markup", page=page, count=len(from_markup.results))
    return from_markup


# ---------------------------------------------------------------------------
# Embedded state path
# ---------------------------------------------------------------------------

def parse_search_state(markup: str, page: int) -> Optional[SearchPage]:
    """Build a SearchPage from the embedded state, None when it has no ads."""
    tree = decode_prerendered_state(markup)
    ads = first_present(tree, LISTING_ADS_SHAPES)
    if not isinstance(ads, list):
        return None

    total_count = 0
    if page == 1:
        total = first_present(tree, LISTING_TOTAL_SHAPES)
        total_count = total if isinstance(total, int) else 0

    results: List[Listing] = []
    for ad in ads:
        if not isinstance(ad, dict):
            continue
        if is_promoted_placeholder(ad):
            continue
        results.append(listing_from_state(ad))

    return SearchPage(total_count=total_count, page=page, results=results)


def is_promoted_placeholder(ad: Dict[str, Any]) -> bool:
    """Promoted banners are highlighted entries with no ad id."""
    return bool(ad.get("isHighlighted")) and not ad.get("id")


def has_active_delivery(ad: Dict[str, Any]) -> bool:
    """True if any delivery channel is active or safe-deal is active."""
    delivery = ad.get("delivery")
    channels = delivery if isinstance(delivery, list) else [delivery]
    if any(isinstance(c, dict) and c.get("active") for c in channels):
        return True
    safedeal = ad.get("safedeal")
    return bool(isinstance(safedeal, dict) and safedeal.get("active"))


def _name(node: Any) -> str:
    return as_text(as_dict(node).get("name"))


def listing_from_state(ad: Dict[str, Any]) -> Listing:
    location = as_dict(ad.get("location"))
    price = as_dict(ad.get("price"))
    regular = as_dict(price.get("regularPrice"))

    return Listing(
        id=as_text(ad.get("id")),
        title=as_text(ad.get("title")),
        price=as_text(first_truthy([price.get("displayValue"), regular.get("displayValue")])),
        location=join_location(_name(location.get("city")), _name(location.get("region"))),
        date=as_text(first_truthy([ad.get("lastRefreshTime"), ad.get("createdTime")])),
        has_delivery=has_active_delivery(ad),
        url=absolute_url(ad.get("url")),
    )


# ---------------------------------------------------------------------------
# Markup path
# ---------------------------------------------------------------------------

def parse_search_markup(markup: str, page: int) -> SearchPage:
    """Build a SearchPage from result cards in the rendered markup."""
    soup = BeautifulSoup(markup, "html.parser")
    # Inline styles would leak CSS into get_text()
    for style in soup.find_all("style"):
        style.decompose()

    total_count = parse_total_count(soup) if page == 1 else 0

    results: List[Listing] = []
    for card in soup.select('[data-testid="l-card"]'):
        listing = listing_from_card(card)
        if listing.id or listing.title:
            results.append(listing)

    return SearchPage(total_count=total_count, page=page, results=results)


def parse_total_count(soup: BeautifulSoup) -> int:
    """Read the displayed result count, e.g. "Znaleźliśmy 1 234 ogłoszenia"."""
    elem = soup.select_one('[data-testid="total-count"]')
    if not elem:
        return 0
    match = _COUNT_RE.search(elem.get_text())
    if not match:
        return 0
    return int(re.sub(r"\s", "", match.group(1)))


def _own_text(elem: Tag) -> str:
    """Text of the element's direct text children, ignoring nested tags."""
    return "".join(
        str(child) for child in elem.children if isinstance(child, NavigableString)
    ).strip()


def listing_from_card(card: Tag) -> Listing:
    link = card.find("a", href=True)
    href = link["href"] if link else ""

    title = ""
    title_elem = card.select_one('[data-testid="ad-card-title"]')
    if title_elem:
        heading = title_elem.find(re.compile(r"^h[1-6]$"))
        title = (heading or title_elem).get_text(strip=True)

    price = ""
    price_elem = card.select_one('[data-testid="ad-price"]')
    if price_elem:
        # Nested spans hold labels like "do negocjacji"
        price = _own_text(price_elem) or price_elem.get_text(strip=True)

    location, date = "", ""
    location_date = card.select_one('[data-testid="location-date"]')
    if location_date:
        parts = location_date.get_text().strip().split(" - ")
        location = parts[0].strip()
        date = " - ".join(parts[1:]).strip()

    has_delivery = bool(
        card.select_one('[data-testid="card-delivery-badge"], [data-testid="free-delivery-tag"]')
    )

    return Listing(
        id=card.get("id") or "",
        title=title,
        price=price,
        location=location,
        date=date,
        has_delivery=has_delivery,
        url=absolute_url(href),
    )
