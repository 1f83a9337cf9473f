from __future__ import annotations

import re
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

PAGE_ID_RE = re.compile(r"-?[0-9]+")


class APIError(Exception):
    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.message, "details": exc.details},
    )


def bad_request(message: str) -> APIError:
    return APIError(400, "bad_request", message)


def parse_page_id(raw: str | None) -> int:
    """Parse a form ``id`` field; missing or non-numeric values are a 400."""
    if raw is None or not raw.strip():
        raise bad_request("id is required")
    value = raw.strip()
    # int() alone would also take "1_0" and non-ASCII digits
    if not PAGE_ID_RE.fullmatch(value):
        raise bad_request(f"id must be an integer, got {raw!r}")
    return int(value)
