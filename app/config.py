"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache
from typing import Literal, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # URL validation: a target must contain at least one of these fragments
    allowed_host_markers: Tuple[str, ...] = ("notion.so", "notion.site")

    # Navigation
    navigation_timeout_ms: int = 60_000
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "domcontentloaded"
    content_root_selector: str = '[data-content-editable-root="true"]'
    content_ready_timeout_ms: int = 10_000

    # Toggle expansion
    toggle_selector: str = '.layout [role="button"][aria-expanded="false"]'
    toggle_max_iterations: int = Field(default=100, ge=1, le=1000)
    toggle_delay_ms: int = 500
    toggle_strategy: Literal["batch", "first"] = "batch"
    settle_ms: int = 2_000

    # Extraction
    title_selectors: Tuple[str, ...] = (
        ".notion-page-content .notion-header__title",
        '[data-content-editable-leaf="true"]',
    )
    block_attribute: str = "data-block-id"
    deduplicate: bool = True

    # Browser provisioning
    headless: bool = True
    browser_args: Tuple[str, ...] = ("--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu")
    browser_ws_endpoint: Optional[str] = None
    user_agent: Optional[str] = None

    # HTTP surface
    cors_allow_origin: str = "*"
    cors_allow_methods: str = "GET, POST, OPTIONS"
    cors_allow_headers: str = "Content-Type, Authorization"
    rate_limit: str = "10/minute"
    log_level: str = "INFO"

    def cors_headers(self) -> dict:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
