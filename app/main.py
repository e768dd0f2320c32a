import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.responses import error_response
from app.routers.scrape import limiter, router as scrape_router

settings = get_settings()

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": settings.log_level.upper(), "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

USAGE_MESSAGE = "Use /scrape endpoint with ?url=<notion-url>"

app = FastAPI(
    title="Notion Scraper API",
    description="Renders a public Notion page, expands its toggles, and returns the page text.",
    version="1.0.0",
    # Only the exact /scrape path is served; /scrape/ falls through to the 404 handler.
    redirect_slashes=False,
)

# Built once; every response carries the same CORS headers.
app.state.cors_headers = settings.cors_headers()

# Rate-limiting state
app.state.limiter = limiter


@app.middleware("http")
async def cors_middleware(request: Request, call_next) -> Response:
    headers = request.app.state.cors_headers
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)
    response = await call_next(request)
    response.headers.update(headers)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, USAGE_MESSAGE)
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return error_response(429, f"Rate limit exceeded: {exc.detail}")


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    response = error_response(
        500, "An unexpected error occurred.", details=str(exc) or type(exc).__name__
    )
    response.headers.update(request.app.state.cors_headers)
    return response


app.include_router(scrape_router)
