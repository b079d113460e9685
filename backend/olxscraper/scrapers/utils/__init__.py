"""Scraper utilities for pacing, identity rotation, rendering and normalization."""

from .rate_limiter import PacingGate
from .user_agents import USER_AGENTS, build_browser_headers, get_random_user_agent
from .browser_manager import HeadlessRenderer
from .normalizer import (
    absolute_url,
    clean_photo_url,
    join_location,
    normalize_description,
)


__all__ = [
    # Pacing
    "PacingGate",
    # User agents
    "USER_AGENTS",
    "build_browser_headers",
    "get_random_user_agent",
    # Rendering
    "HeadlessRenderer",
    # Normalization
    "absolute_url",
    "clean_photo_url",
    "join_location",
    "normalize_description",
]
