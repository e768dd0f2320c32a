import logging

from app.config import Settings
from app.models.request import ScrapeRequest
from app.models.response import ScrapeResponse
from app.services.browser import page_session
from app.services.expander import expand_toggles
from app.services.extractor import extract_notion_content
from app.services.navigator import navigate

logger = logging.getLogger(__name__)


def validate_notion_url(url: str, settings: Settings) -> ScrapeRequest:
    """Return a :class:`ScrapeRequest` for *url* or raise ValueError."""
    request = ScrapeRequest(url=url)
    request.validate_host(settings.allowed_host_markers)
    return request


async def scrape_notion_page(url: str, settings: Settings) -> ScrapeResponse:
    """Render *url* in a headless browser and return its title and body text.

    Steps run strictly in sequence: navigate, wait for the content root,
    expand toggles, settle, snapshot the DOM.  The browser is released before
    this coroutine returns or raises.

    Raises:
        BrowserLaunchError: if no browser could be acquired.
        ContentNotReadyError: if the Notion content never rendered.
        playwright.async_api.Error: on navigation or snapshot failures.
    """
    async with page_session(settings) as session:
        page = session.page
        await navigate(page, url, settings)
        await expand_toggles(page, settings)
        if settings.settle_ms > 0:
            await page.wait_for_timeout(settings.settle_ms)
        html = await page.content()

    result = extract_notion_content(html, settings)
    logger.info(
        "Extracted Notion page",
        extra={"url": url, "title": result.title, "content_chars": len(result.content)},
    )
    return result
