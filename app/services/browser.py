"""Headless-browser provisioning for Notion page rendering.

A :class:`PageSession` owns exactly one browser and one page.  Callers obtain
it through :func:`page_session`, which guarantees the browser is closed once
the ``async with`` block exits, whether it finished normally or raised.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from playwright.async_api import Browser, Page, Playwright, async_playwright

from app.config import Settings

logger = logging.getLogger(__name__)


class BrowserLaunchError(RuntimeError):
    """The headless browser could not be started or reached."""


class BrowserSession:
    """A running browser together with the Playwright driver that started it."""

    def __init__(self, playwright: Playwright, browser: Browser, settings: Settings) -> None:
        self._playwright = playwright
        self._browser = browser
        self._settings = settings

    async def new_page(self) -> Page:
        context = await self._browser.new_context(user_agent=self._settings.user_agent)
        return await context.new_page()

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


@dataclass
class PageSession:
    browser: BrowserSession
    page: Page


async def launch_browser(settings: Settings) -> BrowserSession:
    """Start Chromium locally, or attach to a remote one over CDP.

    ``settings.browser_ws_endpoint`` selects the remote mode; otherwise a
    local headless Chromium is launched.
    """
    playwright = await async_playwright().start()
    try:
        if settings.browser_ws_endpoint:
            browser = await playwright.chromium.connect_over_cdp(
                settings.browser_ws_endpoint,
                timeout=settings.navigation_timeout_ms,
            )
        else:
            browser = await playwright.chromium.launch(
                headless=settings.headless,
                # --no-sandbox is required when running as root inside a container.
                args=list(settings.browser_args),
            )
    except Exception:
        await playwright.stop()
        raise
    return BrowserSession(playwright, browser, settings)


@asynccontextmanager
async def page_session(settings: Settings) -> AsyncIterator[PageSession]:
    """Yield a fresh :class:`PageSession`; the browser is closed on every exit path.

    Raises:
        BrowserLaunchError: if the browser could not be acquired.
    """
    try:
        browser = await launch_browser(settings)
    except Exception as exc:
        raise BrowserLaunchError(f"Could not launch headless browser: {exc}") from exc

    try:
        page = await browser.new_page()
        yield PageSession(browser=browser, page=page)
    finally:
        await browser.close()
        logger.debug("Browser closed")
