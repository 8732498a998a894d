"""
Request pipeline stages that wrap every route.

The logging stage runs first for every request. The error handlers are the
terminal stage: each failure, whichever stage raised it, is logged once here
and turned into the standard error envelope. Nothing else builds error
responses.
"""

import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)


async def log_request(request: Request, call_next):
    """Logging stage: one line per request, before any other stage runs."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    logger.info("%s %s", request.method, url)
    try:
        return await call_next(request)
    except Exception as exc:
        # handled here so nothing escapes the app to be logged again by the server
        return error_response(500, None, exc)


def success(status_code: int = 200, **payload: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": True, **payload})


def _stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def error_response(status_code: Optional[int], message: Optional[str], exc: BaseException) -> JSONResponse:
    """Terminal stage: log the failure once and emit the error envelope."""
    status_code = status_code or ErrorKind.INTERNAL.status_code
    message = message or ErrorKind.INTERNAL.default_message
    dev = get_settings().is_development

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Error: %s (statusCode=%d)",
        message,
        status_code,
        exc_info=(type(exc), exc, exc.__traceback__) if dev else None,
    )

    body: Dict[str, Any] = {"message": message, "statusCode": status_code}
    if dev:
        body["stack"] = _stack(exc)
    return JSONResponse(status_code=status_code, content={"success": False, "error": body})


def register_error_handlers(app: FastAPI) -> None:
    """Register the terminal error stage on the application."""

    @app.exception_handler(ApiError)
    async def handle_api_error(_request: Request, exc: ApiError) -> JSONResponse:
        return error_response(exc.status_code, exc.message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # unmatched paths and methods on known paths are both "no such route"
        if exc.status_code in (404, 405):
            return error_response(404, f"Route {request.url.path} not found", exc)
        return error_response(exc.status_code, str(exc.detail), exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
            for e in exc.errors()
        ]
        return error_response(400, "; ".join(messages) or ErrorKind.VALIDATION.default_message, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        # outside development the exception text only reaches the log
        return error_response(500, None, exc)
