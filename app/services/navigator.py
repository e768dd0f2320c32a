import logging

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.config import Settings

logger = logging.getLogger(__name__)


class ContentNotReadyError(RuntimeError):
    """The Notion content root never appeared in the DOM."""


async def navigate(page: Page, url: str, settings: Settings) -> None:
    """Load *url* and block until the Notion content root is present.

    Raises:
        ContentNotReadyError: if the content root is missing after
            ``settings.content_ready_timeout_ms``.
        playwright.async_api.Error: on navigation errors, including the
            navigation timeout.
    """
    await page.goto(url, wait_until=settings.wait_until, timeout=settings.navigation_timeout_ms)

    try:
        await page.wait_for_selector(
            settings.content_root_selector, timeout=settings.content_ready_timeout_ms
        )
    except PlaywrightTimeoutError as exc:
        raise ContentNotReadyError(
            f"Notion content did not load: {settings.content_root_selector} not found "
            f"within {settings.content_ready_timeout_ms} ms"
        ) from exc

    logger.info("Notion content root ready for %s", url)
