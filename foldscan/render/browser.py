"""
Browser session for product page scans.

Launches headless Chromium with the locked mobile profile, navigates to the
target page and hands back a PlaywrightSurface. The browser is closed on the
way out whether or not the scan succeeded.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import async_playwright

from ..core.config import Config
from ..services.fold_scan.geometry import VIEWPORT
from .playwright_surface import PlaywrightSurface

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_product_page(
    url: str,
    headless: Optional[bool] = None,
    user_agent: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> AsyncIterator[PlaywrightSurface]:
    """
    Load a page in a fresh mobile browser context.

    Args:
        url: Page to load
        headless: Run Chromium headless (default: Config.HEADLESS)
        user_agent: Mobile user agent (default: Config.USER_AGENT)
        timeout_ms: Navigation timeout (default: Config.NAVIGATION_TIMEOUT_MS)

    Yields:
        PlaywrightSurface for the loaded page
    """
    headless = Config.HEADLESS if headless is None else headless
    user_agent = user_agent or Config.USER_AGENT
    timeout_ms = timeout_ms or Config.NAVIGATION_TIMEOUT_MS

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(
                viewport={'width': int(VIEWPORT.width), 'height': int(VIEWPORT.height)},
                user_agent=user_agent,
            )
            page = await context.new_page()

            logger.info(f"Loading {url}")
            await page.goto(url, wait_until='networkidle', timeout=timeout_ms)

            yield PlaywrightSurface(page)
        finally:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"Failed to close browser cleanly: {e}")
