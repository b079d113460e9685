"""Offer detail parsing from the internal API, the embedded state or markup.

The three parsers are independent: the caller picks one based on what it
fetched. Field precedence (which source wins for price, location, posted
date ...) is expressed by the small accessor functions below.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup

from olxscraper.scrapers.base import ProductDetail, Seller
from olxscraper.scrapers.utils.normalizer import (
    absolute_url,
    as_dict,
    as_text,
    clean_photo_url,
    first_truthy,
    join_location,
    normalize_description,
)

logger = structlog.get_logger(__name__)


PRICE_PARAM_KEYS = frozenset({"price", "Cena"})
DEFAULT_CURRENCY = "zł"
NEGOTIATION_KEYWORD = "negocj"
RAW_NEGOTIATION_FLAG = '"negotiation":true'

_OFFER_ID_RE = re.compile(r"ID([a-zA-Z0-9]+)\.html")
_NUMERIC_ID_RE = re.compile(r"(?<![\w])(\d{6,})(?![\w])")


# ---------------------------------------------------------------------------
# Field accessors
# ---------------------------------------------------------------------------

def param_value(param: Dict[str, Any]) -> str:
    """Value of one parameter entry.

    Precedence: plain string value, then value.label, then normalizedValue,
    then the string form of the value.
    """
    value = param.get("value")
    if isinstance(value, str):
        return value
    label = as_dict(value).get("label")
    if label:
        return as_text(label)
    normalized = param.get("normalizedValue") or as_dict(value).get("normalizedValue")
    if normalized:
        return as_text(normalized)
    return as_text(value)


def split_parameters(params: Any) -> Tuple[Dict[str, str], str]:
    """Split parameter entries into the label->value map and a diverted price.

    Entries keyed "price" (or its localized label) do not belong to the map;
    their value is returned separately as the last-resort price.
    """
    parameters: Dict[str, str] = {}
    diverted_price = ""
    if not isinstance(params, list):
        return parameters, diverted_price

    for param in params:
        if not isinstance(param, dict):
            continue
        key = as_text(param.get("name") or param.get("key"))
        if not key:
            continue
        value = param_value(param)
        if key in PRICE_PARAM_KEYS or as_text(param.get("key")) in PRICE_PARAM_KEYS:
            diverted_price = value
        else:
            parameters[key] = value
    return parameters, diverted_price


def computed_regular_price(regular: Dict[str, Any]) -> str:
    """Build "<value> <currency>" from a regularPrice node, '' if no value."""
    value = regular.get("value")
    if not value:
        return ""
    currency = regular.get("currencyCode") or DEFAULT_CURRENCY
    return f"{as_text(value)} {currency}"


def resolve_api_price(price: Any, diverted_price: str = "") -> str:
    """Price of an API payload.

    Precedence: displayValue, regularPrice.displayValue, computed regular
    price, then the price diverted from the parameter list.
    """
    price = as_dict(price)
    regular = as_dict(price.get("regularPrice"))
    return as_text(first_truthy([
        price.get("displayValue"),
        regular.get("displayValue"),
        computed_regular_price(regular),
        diverted_price,
    ]))


def resolve_state_price(price: Any, diverted_price: str = "") -> str:
    """Price of an embedded-state ad: displayValue, computed regular, diverted."""
    price = as_dict(price)
    return as_text(first_truthy([
        price.get("displayValue"),
        computed_regular_price(as_dict(price.get("regularPrice"))),
        diverted_price,
    ]))


def collect_photos(photos: Any) -> List[str]:
    """Photo links (dicts with "link" or bare strings), template tokens stripped."""
    if not isinstance(photos, list):
        return []
    links = []
    for photo in photos:
        raw = photo.get("link") if isinstance(photo, dict) else photo
        if raw and isinstance(raw, str):
            links.append(clean_photo_url(raw))
    return links


def _seller(ad: Dict[str, Any]) -> Seller:
    contact = as_dict(ad.get("contact"))
    user = as_dict(ad.get("user"))
    return Seller(
        name=as_text(first_truthy([contact.get("name"), user.get("name")])),
        member_since=as_text(user.get("created")),
    )


# ---------------------------------------------------------------------------
# Internal API payload
# ---------------------------------------------------------------------------

def decode_api_body(body: str) -> Optional[Dict[str, Any]]:
    """Decode an offers API response body.

    The body is normally raw JSON. After a headless escalation it is the
    browser's rendering of that JSON, so the page text is tried as well.
    """
    try:
        payload = json.loads(body)
    except (ValueError, TypeError):
        text = BeautifulSoup(body or "", "html.parser").get_text()
        try:
            payload = json.loads(text)
        except ValueError:
            logger.warning("api_body_not_json", length=len(body or ""))
            return None
    return payload if isinstance(payload, dict) else None


def parse_product_api_response(body: str) -> ProductDetail:
    """Parse an offers API response body; an empty record when not found."""
    payload = decode_api_body(body)
    ad = as_dict(payload.get("data")) if payload else {}
    if not ad.get("id"):
        return ProductDetail()
    return parse_product_from_api(ad)


def parse_product_from_api(ad: Dict[str, Any]) -> ProductDetail:
    """Parse an ad object from the internal offers API."""
    parameters, diverted_price = split_parameters(ad.get("params"))
    location = as_dict(ad.get("location"))
    price = as_dict(ad.get("price"))

    return ProductDetail(
        id=as_text(ad.get("id")),
        title=as_text(ad.get("title")),
        description=normalize_description(ad.get("description")),
        price=resolve_api_price(price, diverted_price),
        negotiable=bool(price.get("negotiable")),
        parameters=parameters,
        photos=collect_photos(ad.get("photos")),
        location=as_text(location.get("pathName")) or join_location(
            as_text(as_dict(location.get("city")).get("name")),
            as_text(as_dict(location.get("region")).get("name")),
        ),
        posted_at=as_text(first_truthy([
            ad.get("last_refresh_time"),
            ad.get("created_time"),
            ad.get("lastRefreshTime"),
            ad.get("createdTime"),
        ])),
        seller=_seller(ad),
        url=absolute_url(ad.get("url")),
    )


# ---------------------------------------------------------------------------
# Embedded state
# ---------------------------------------------------------------------------

def parse_product_from_state(ad: Dict[str, Any], url: str) -> ProductDetail:
    """Parse the ad sub-tree of an offer page's embedded state."""
    parameters, diverted_price = split_parameters(ad.get("params"))
    location = as_dict(ad.get("location"))
    price = as_dict(ad.get("price"))
    contact = as_dict(ad.get("contact"))

    return ProductDetail(
        id=as_text(ad.get("id")),
        title=as_text(ad.get("title")),
        description=normalize_description(ad.get("description")),
        price=resolve_state_price(price, diverted_price),
        negotiable=bool(contact.get("negotiation") or price.get("negotiation")),
        parameters=parameters,
        photos=collect_photos(ad.get("photos")),
        location=as_text(location.get("pathName")) or join_location(
            as_text(location.get("cityName")),
            as_text(location.get("regionName")),
        ),
        posted_at=as_text(first_truthy([ad.get("lastRefreshTime"), ad.get("createdTime")])),
        seller=_seller(ad),
        url=url,
    )


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------

def offer_id_from_url(url: str) -> str:
    """Recover the offer id embedded in an offer URL path."""
    match = _OFFER_ID_RE.search(url)
    if match:
        return match.group(1)
    match = _NUMERIC_ID_RE.search(url.split("?", 1)[0])
    return match.group(1) if match else ""


def _text(soup: BeautifulSoup, testid: str) -> str:
    elem = soup.select_one(f'[data-testid="{testid}"]')
    return elem.get_text(strip=True) if elem else ""


def parse_product_from_markup(markup: str, url: str) -> ProductDetail:
    """Parse an offer page by its data-testid attributes."""
    soup = BeautifulSoup(markup, "html.parser")
    for style in soup.find_all("style"):
        style.decompose()

    price_text = _text(soup, "ad-price-container")

    description = ""
    description_elem = soup.select_one('[data-testid="ad_description"]')
    if description_elem:
        for br in description_elem.find_all("br"):
            br.replace_with("\n")
        description = description_elem.get_text().strip()

    parameters: Dict[str, str] = {}
    container = soup.select_one('[data-testid="ad-parameters-container"]')
    if container:
        for line in container.find_all("p"):
            key, sep, value = line.get_text(" ", strip=True).partition(":")
            if key.strip() and sep:
                parameters[key.strip()] = value.strip()

    photos: List[str] = []
    for img in soup.select('[data-testid="swiper-image"]'):
        src = img.get("src")
        if not src and img.get("srcset"):
            src = img["srcset"].split(",")[0].strip().split(" ")[0]
        if src:
            photos.append(clean_photo_url(src))

    negotiable = NEGOTIATION_KEYWORD in price_text.lower() or RAW_NEGOTIATION_FLAG in markup

    return ProductDetail(
        id=offer_id_from_url(url),
        title=_text(soup, "offer_title"),
        description=description,
        price=price_text,
        negotiable=negotiable,
        parameters=parameters,
        photos=photos,
        location="",
        posted_at=_text(soup, "ad-posted-at"),
        seller=Seller(
            name=_text(soup, "user-profile-user-name"),
            member_since=_text(soup, "member-since"),
        ),
        url=url,
    )
