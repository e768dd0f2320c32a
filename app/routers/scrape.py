import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings
from app.models.response import ScrapeResponse
from app.responses import PrettyJSONResponse, error_response
from app.services.scraper import scrape_notion_page, validate_notion_url

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


@router.api_route(
    "/scrape",
    methods=["GET", "POST"],
    response_model=ScrapeResponse,
    response_class=PrettyJSONResponse,
    summary="Scrape the text of a public Notion page",
)
@limiter.limit(lambda: get_settings().rate_limit)
async def scrape(
    request: Request,
    url: Optional[str] = Query(default=None, description="Public notion.so / notion.site page URL."),
):
    """Render a Notion page, expand every toggle, and return its title and text.

    Block texts are returned in document order, separated by a blank line.
    """
    settings = get_settings()

    if not url:
        return error_response(400, 'Missing "url" query parameter')

    try:
        validate_notion_url(url, settings)
    except ValueError as exc:
        logger.warning("Rejected URL: %s – %s", url, exc)
        return error_response(400, str(exc))

    logger.info("Scrape request received", extra={"url": url})

    try:
        result = await scrape_notion_page(url, settings)
    except Exception as exc:
        logger.error("Failed to scrape %s: %s", url, exc)
        return error_response(500, "Failed to scrape Notion page", details=str(exc) or type(exc).__name__)

    return PrettyJSONResponse(content=result.model_dump())
