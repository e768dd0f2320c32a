import json
from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse

from app.models.response import ErrorResponse


class PrettyJSONResponse(JSONResponse):
    """JSON response rendered with two-space indentation."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


def error_response(
    status_code: int,
    error: str,
    details: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> PrettyJSONResponse:
    payload = ErrorResponse(error=error, details=details)
    return PrettyJSONResponse(
        status_code=status_code,
        content=payload.model_dump(exclude_none=True),
        headers=dict(headers) if headers else None,
    )
