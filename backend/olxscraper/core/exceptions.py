"""Custom exception classes for the scraper."""

from typing import Optional


class OLXScraperException(Exception):
    """Base exception for all scraper errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class RetrievalError(OLXScraperException):
    """Raised when content cannot be retrieved from the marketplace.

    Covers transport failures, timeouts, non-success statuses that survive
    redirects and a failed headless rendering attempt.
    """

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to retrieve {url}: {message}")


class ConfigurationError(OLXScraperException):
    """Raised when a required fallback is administratively disabled."""
