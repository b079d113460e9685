"""Field normalization shared by the listing and detail parsers."""

import html
import re
from typing import Any, Dict, Iterable, Optional

from olxscraper.config import settings


# Image links carry a size template (";s={width}x{height}" or ";s=216x152")
# and a quality suffix (";q=80") that must be dropped for full resolution.
_PHOTO_SIZE_RE = re.compile(r";s=\{?\w+\}?x\{?\w+\}?")
_PHOTO_QUALITY_RE = re.compile(r";q=\d+")
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")


def clean_photo_url(url: str) -> str:
    """Strip size/quality template tokens from an image URL.

    Example:
        "https://img.site/a;s={w}x{h};q=80.jpg" -> "https://img.site/a.jpg"
    """
    return _PHOTO_QUALITY_RE.sub("", _PHOTO_SIZE_RE.sub("", url))


def normalize_description(raw: Optional[str]) -> str:
    """Turn an HTML description into plain text.

    Line-break tags become newlines first; only then are the remaining tags
    stripped, otherwise the intended line breaks are lost.
    """
    if not raw:
        return ""
    text = _BR_RE.sub("\n", raw)
    text = _TAG_RE.sub("", text)
    return html.unescape(text)


def absolute_url(href: Any, base_url: Optional[str] = None) -> str:
    """Resolve a site-relative href against the marketplace base URL.

    Anything but a non-empty string resolves to an empty URL.
    """
    if not href or not isinstance(href, str):
        return ""
    if href.startswith("http"):
        return href
    base = (base_url or settings.BASE_URL).rstrip("/")
    if not href.startswith("/"):
        href = f"/{href}"
    return f"{base}{href}"


def join_location(*parts: Optional[str]) -> str:
    """Join location parts (city, region) with ", ", skipping empty ones."""
    return ", ".join(p for p in parts if p)


def first_truthy(values: Iterable[Any], default: Any = "") -> Any:
    """Return the first truthy value, mirroring an ``a or b or c`` chain."""
    for value in values:
        if value:
            return value
    return default


def as_text(value: Any) -> str:
    """String form of a scalar JSON value; None becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_dict(value: Any) -> Dict[str, Any]:
    """The value itself when it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}
