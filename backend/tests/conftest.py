"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Callable, Dict, List

import pytest


def _state_markup(tree: Any, terminator: str = ";\n") -> str:
    """Embed a tree the way the marketplace does: a JSON string of JSON."""
    literal = json.dumps(json.dumps(tree))
    return (
        "<html><head><title>OLX</title></head><body>"
        f"<script>window.__PRERENDERED_STATE__= {literal}{terminator}"
        "window.__TAURUS__ = {};</script>"
        "</body></html>"
    )


def _ad(index: int, **overrides) -> Dict[str, Any]:
    ad = {
        "id": 900000000 + index,
        "title": f"iPhone 13 #{index}",
        "url": f"/d/oferta/iphone-13-{index}-CID99-IDab{index}.html",
        "price": {"displayValue": f"{1000 + index} zł", "regularPrice": {"value": 1000 + index, "currencyCode": "PLN"}},
        "location": {"city": {"name": "Warszawa"}, "region": {"name": "Mazowieckie"}},
        "lastRefreshTime": "2024-05-01T10:00:00+02:00",
        "createdTime": "2024-04-01T10:00:00+02:00",
        "delivery": {"active": False},
        "safedeal": {"active": False},
        "isHighlighted": False,
    }
    ad.update(overrides)
    return ad


@pytest.fixture
def state_markup() -> Callable[..., str]:
    """Build page markup carrying an embedded state tree."""
    return _state_markup


@pytest.fixture
def make_ad() -> Callable[..., Dict[str, Any]]:
    """Build one embedded-state listing ad."""
    return _ad


@pytest.fixture
def listing_page_markup() -> Callable[..., str]:
    """Build a search results page whose embedded state holds count ads."""

    def build(count: int, total_count: int = 0, start: int = 0) -> str:
        ads: List[Dict[str, Any]] = [_ad(start + i) for i in range(count)]
        return _state_markup({"listing": {"listing": {"ads": ads, "totalCount": total_count}}})

    return build
