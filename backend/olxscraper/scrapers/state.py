"""Embedded state extraction.

The marketplace serializes its client state into the page as a JSON string
literal assigned to ``window.__PRERENDERED_STATE__``. The payload is
double-encoded: the literal decodes to a string which itself is JSON.
The layout of that tree has changed over time, so each consumer asks for
its data through a list of path shapes tried in order.
"""

import json
from typing import Any, Optional, Sequence, Tuple

STATE_MARKER = 'window.__PRERENDERED_STATE__= "'

Shape = Tuple[str, ...]

# Newest layout first
LISTING_ADS_SHAPES: Sequence[Shape] = (("listing", "listing", "ads"), ("listing", "ads"))
LISTING_TOTAL_SHAPES: Sequence[Shape] = (("listing", "listing", "totalCount"), ("listing", "totalCount"))
AD_SHAPES: Sequence[Shape] = (("ad", "ad"), ("ad",))


def decode_prerendered_state(markup: str) -> Optional[Any]:
    """Decode the whole embedded state tree, or None when absent or malformed."""
    if not isinstance(markup, str):
        return None

    idx = markup.find(STATE_MARKER)
    if idx == -1:
        return None

    # Keep the opening quote so the slice is a complete JSON string literal
    start = idx + len(STATE_MARKER) - 1
    end = markup.find('";\n', start)
    if end == -1:
        end = markup.find('";', start)
    if end == -1:
        return None

    raw = markup[start:end + 1]
    try:
        inner = json.loads(raw)
        return json.loads(inner) if isinstance(inner, str) else inner
    except (ValueError, TypeError, RecursionError):
        return None


def dig(tree: Any, shape: Shape) -> Optional[Any]:
    """Follow a key path through nested dicts, None on any miss."""
    node = tree
    for key in shape:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def first_present(tree: Any, shapes: Sequence[Shape]) -> Optional[Any]:
    """Return the first non-empty node among shapes, in order."""
    for shape in shapes:
        node = dig(tree, shape)
        if node:
            return node
    return None


def extract_embedded_state(markup: str, shapes: Sequence[Shape] = AD_SHAPES) -> Optional[Any]:
    """Locate, decode and narrow the embedded state. Never raises."""
    tree = decode_prerendered_state(markup)
    if tree is None:
        return None
    return first_present(tree, shapes)
