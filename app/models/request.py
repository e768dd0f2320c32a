from typing import Tuple
from urllib.parse import urlparse

from pydantic import BaseModel

ALLOWED_SCHEMES = {"http", "https"}
INVALID_URL_MESSAGE = "Invalid Notion URL. Must be from notion.so or notion.site"


class ScrapeRequest(BaseModel):
    url: str

    def validate_host(self, markers: Tuple[str, ...]) -> None:
        """Raise ValueError unless *url* is http(s) and mentions one of *markers*.

        Any single marker is enough; a Notion URL never contains both
        ``notion.so`` and ``notion.site``.
        """
        if urlparse(self.url).scheme not in ALLOWED_SCHEMES:
            raise ValueError(INVALID_URL_MESSAGE)
        if not any(marker in self.url for marker in markers):
            raise ValueError(INVALID_URL_MESSAGE)
