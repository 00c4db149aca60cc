"""Error responses for the HTTP API.

Every error body is ``{"error": "...", "details": ...}`` with ``details``
omitted when there is nothing to add.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, error: str, details: Any = None
) -> JSONResponse:
    """Build an error JSONResponse in the API's wire format."""
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def _handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTPException (401s and 503s from dependencies) as ``{error}``."""
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 for anything a route did not handle."""
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(500, "Internal Server Error", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Attach the API's exception handlers to the application."""
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected)
