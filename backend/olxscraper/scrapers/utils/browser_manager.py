"""Headless Chromium rendering used when direct retrieval is blocked.

Unlike a pooled browser, every render launches its own isolated browser
and tears it down before returning, whatever happened in between.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from playwright.async_api import Browser, Error as PlaywrightError, async_playwright

from olxscraper.config import settings
from olxscraper.scrapers.base import FetchOutcome
from olxscraper.scrapers.utils.user_agents import get_random_user_agent

logger = structlog.get_logger(__name__)


# Minimal stealth JS to mask automation signals
STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['pl-PL', 'pl', 'en-US', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = { runtime: {} };
"""


class HeadlessRenderer:
    """Renders a URL in a throwaway headless browser and returns its markup."""

    def __init__(
        self,
        executable_path: Optional[str] = None,
        navigation_timeout: Optional[float] = None,
        settle_delay: Optional[float] = None,
        accept_language: str = "pl-PL,pl;q=0.9",
    ):
        """Initialize renderer.

        Args:
            executable_path: Custom Chromium binary, None for Playwright's own
            navigation_timeout: Seconds allowed for page.goto
            settle_delay: Seconds to wait after DOM ready before capturing
            accept_language: Accept-Language sent by the browser
        """
        self._executable_path = executable_path or settings.PLAYWRIGHT_CHROMIUM_EXECUTABLE_PATH or None
        self._navigation_timeout = (
            navigation_timeout if navigation_timeout is not None else settings.NAVIGATION_TIMEOUT_SECONDS
        )
        self._settle_delay = settle_delay if settle_delay is not None else settings.RENDER_SETTLE_SECONDS
        self._accept_language = accept_language

    @asynccontextmanager
    async def isolated_browser(self) -> AsyncIterator[Browser]:
        """Launch a dedicated browser, closing it on every exit path."""
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True,
                executable_path=self._executable_path,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--disable-dev-shm-usage",
                    "--no-sandbox",
                ],
            )
            logger.info("browser_started")
            try:
                yield browser
            finally:
                await browser.close()
                logger.info("browser_stopped")

    async def render(self, url: str) -> FetchOutcome:
        """Navigate to url and capture the rendered markup.

        Any rendering failure (launch, navigation, timeout or otherwise) is
        reported as a FAILED outcome; the browser is closed before this returns.
        """
        try:
            async with self.isolated_browser() as browser:
                context = await browser.new_context(
                    user_agent=get_random_user_agent(),
                    viewport={"width": 1920, "height": 1080},
                    locale="pl-PL",
                    timezone_id="Europe/Warsaw",
                    extra_http_headers={"Accept-Language": self._accept_language},
                )
                await context.add_init_script(STEALTH_JS)
                page = await context.new_page()
                await page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=self._navigation_timeout * 1000,
                )
                await page.wait_for_timeout(self._settle_delay * 1000)
                html = await page.content()
        except PlaywrightError as e:
            logger.error("render_failed", url=url, error=str(e))
            return FetchOutcome.failed(f"headless rendering failed: {e}")
        except Exception as e:
            logger.error("render_crashed", url=url, error=str(e), error_type=type(e).__name__)
            return FetchOutcome.failed(f"headless rendering failed: {type(e).__name__}: {e}")

        logger.info("render_complete", url=url, length=len(html))
        return FetchOutcome.delivered(html)
