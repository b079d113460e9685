"""Paced, identity-rotating page retrieval with headless escalation.

A retrieval goes Idle -> Requesting -> Delivered | Blocked, and a blocked
request goes Blocked -> Rendering -> Delivered | Failed. There is exactly
one escalation per call: a rendered page is returned as-is even if it
still carries a challenge.
"""

from typing import Optional

import httpx
import structlog

from olxscraper.config import settings
from olxscraper.core.exceptions import ConfigurationError, RetrievalError
from olxscraper.scrapers.base import FetchOutcome, FetchStatus
from olxscraper.scrapers.utils.browser_manager import HeadlessRenderer
from olxscraper.scrapers.utils.rate_limiter import PacingGate
from olxscraper.scrapers.utils.user_agents import build_browser_headers, get_random_user_agent

logger = structlog.get_logger(__name__)


CHALLENGE_MARKERS = ("captcha", "cf-challenge")
BLOCKING_STATUS_CODES = frozenset({403, 429})


def is_challenge_page(body: str) -> bool:
    """Check whether a response body is an anti-bot challenge."""
    return any(marker in body for marker in CHALLENGE_MARKERS)


class Fetcher:
    """Retrieves marketplace pages, escalating to a headless browser when blocked.

    One instance is meant to live for the whole process: it owns the pacing
    clock and the cookie jar shared by every request.
    """

    def __init__(
        self,
        pacing: Optional[PacingGate] = None,
        renderer: Optional[HeadlessRenderer] = None,
        client: Optional[httpx.AsyncClient] = None,
        rendering_enabled: Optional[bool] = None,
    ):
        """Initialize fetcher.

        Args:
            pacing: Shared pacing gate; built from settings when omitted
            renderer: Headless renderer used on escalation
            client: Preconfigured HTTP client (tests inject a mock transport)
            rendering_enabled: Override for settings.PLAYWRIGHT_ENABLED
        """
        self.pacing = pacing or PacingGate(
            base_delay=settings.base_delay_seconds,
            jitter=settings.jitter_seconds,
        )
        self.renderer = renderer or HeadlessRenderer(accept_language=settings.ACCEPT_LANGUAGE)
        self.rendering_enabled = (
            settings.PLAYWRIGHT_ENABLED if rendering_enabled is None else rendering_enabled
        )
        self._client = client
        self.logger = logger.bind(component="fetcher")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # The client's cookie jar persists for the lifetime of the fetcher
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=settings.MAX_REDIRECTS,
                timeout=settings.REQUEST_TIMEOUT_SECONDS,
            )
        return self._client

    async def retrieve(self, url: str) -> str:
        """Retrieve the content at url.

        Args:
            url: Absolute URL to fetch

        Returns:
            Response body, or the rendered markup after an escalation

        Raises:
            RetrievalError: Transport failure, error status or failed rendering
            ConfigurationError: Escalation needed but rendering is disabled
        """
        await self.pacing.wait()
        outcome = await self._request(url)

        if outcome.status is FetchStatus.DELIVERED:
            return outcome.content
        if outcome.status is FetchStatus.FAILED:
            raise RetrievalError(url, outcome.reason, status_code=outcome.status_code)

        self.logger.warning(
            "blocking_detected",
            url=url,
            reason=outcome.reason,
            status_code=outcome.status_code,
        )
        return await self._escalate(url)

    async def _request(self, url: str) -> FetchOutcome:
        """Send one direct HTTP request and classify the response."""
        headers = build_browser_headers(
            user_agent=get_random_user_agent(),
            accept_language=settings.ACCEPT_LANGUAGE,
            referer=f"{settings.BASE_URL}/",
        )
        self.logger.info("fetching_url", url=url)

        try:
            response = await self._get_client().get(url, headers=headers)
        except httpx.TimeoutException as e:
            self.logger.error("fetch_timeout", url=url, error=str(e))
            return FetchOutcome.failed(f"timed out: {e}")
        except httpx.HTTPError as e:
            self.logger.error("fetch_transport_error", url=url, error=str(e))
            return FetchOutcome.failed(str(e) or type(e).__name__)

        status_code = response.status_code
        if status_code in BLOCKING_STATUS_CODES:
            return FetchOutcome.blocked(f"HTTP {status_code}", status_code=status_code)
        if status_code >= 400:
            self.logger.error("fetch_http_error", url=url, status_code=status_code)
            return FetchOutcome.failed(f"HTTP {status_code}", status_code=status_code)

        body = response.text
        if is_challenge_page(body):
            return FetchOutcome.blocked("challenge marker in body", status_code=status_code)
        return FetchOutcome.delivered(body, status_code=status_code)

    async def _escalate(self, url: str) -> str:
        """Render url in a headless browser; the single escalation step."""
        if not self.rendering_enabled:
            raise ConfigurationError(
                f"Headless rendering is disabled and direct retrieval of {url} was blocked"
            )

        self.logger.info("escalating_to_headless", url=url)
        outcome = await self.renderer.render(url)
        if outcome.status is FetchStatus.DELIVERED:
            return outcome.content
        raise RetrievalError(url, outcome.reason, status_code=outcome.status_code)

    async def aclose(self) -> None:
        """Close the HTTP client (and with it the cookie jar)."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
