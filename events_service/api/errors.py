"""Centralized error responses.

Every failure leaves the service through one of the handlers registered here
and is answered with ``{"success": false, "error": ...}``. Operational errors
keep their status code and message; anything unrecognized becomes a 500.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..db import DatabaseError
from ..errors import APIError, UploadError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"
DATABASE_ERROR_MESSAGE = "Database error occurred"

def error_response(status_code: int, message: str, exc: BaseException = None, expose_stack: bool = False) -> JSONResponse:
    """Build the error envelope."""
    content = {"success": False, "error": message}
    if expose_stack and exc is not None:
        content["stack"] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status_code, content=content)

def register_error_handlers(app: FastAPI, is_production: bool) -> None:
    """Attach the exception handlers to the application."""

    @app.exception_handler(UploadError)
    async def handle_upload_error(request: Request, exc: UploadError):
        logger.warning(f"Upload rejected on {request.url.path}: {exc.code} ({exc.message})")
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, exc: APIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
            return error_response(exc.status_code, exc.message, exc, expose_stack=not is_production)
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = f"Route not found - {request.url.path}"
        else:
            message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {message}")
        return error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        details = '; '.join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in exc.errors()
        )
        return error_response(400, f"Invalid request: {details}")

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return error_response(500, DATABASE_ERROR_MESSAGE, exc, expose_stack=not is_production)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return error_response(500, GENERIC_ERROR_MESSAGE, exc, expose_stack=not is_production)
