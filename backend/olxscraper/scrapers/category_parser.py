"""Top-level category parsing from the marketplace landing page."""

from typing import List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from olxscraper.scrapers.base import Category
from olxscraper.scrapers.utils.normalizer import absolute_url


def parse_categories(markup: str) -> List[Category]:
    """Parse the category tiles of the landing page.

    Tiles are anchors whose data-testid starts with "cat-". The name comes
    from the nested paragraph when there is one, else the anchor text.
    """
    soup = BeautifulSoup(markup, "html.parser")
    categories: List[Category] = []

    for anchor in soup.select('a[data-testid^="cat-"]'):
        href = anchor.get("href") or ""
        label = anchor.find("p")
        name = (label.get_text(strip=True) if label else "") or anchor.get_text(strip=True)
        slug = urlparse(href).path.strip("/")
        if not name or not slug:
            continue
        categories.append(Category(name=name, slug=slug, url=absolute_url(href)))

    return categories
