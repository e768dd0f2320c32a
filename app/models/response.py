from typing import Optional

from pydantic import BaseModel


class ScrapeResponse(BaseModel):
    title: str
    content: str
    """Block texts in document order, separated by a blank line."""


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
