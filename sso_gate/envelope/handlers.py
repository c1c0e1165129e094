"""
Centralized error handlers for FastAPI/Starlette.

Every failure, whether raised by the gate, by a handler or by the framework
itself, is rendered through the error envelope.
"""

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from sso_gate.errors import ApiError, ErrorKind
from .responses import error_response

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _kind_for_status(status_code: int) -> ErrorKind:
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code in (401, 403):
        return ErrorKind.AUTH
    if status_code >= 500:
        return ErrorKind.SERVER
    return ErrorKind.REQUEST


def http_exception_to_error(exc: StarletteHTTPException) -> ApiError:
    """Translate a framework HTTPException into an ApiError, keeping its status."""
    message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    return ApiError(_kind_for_status(exc.status_code), message, status=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    """Register the envelope error handlers on the application.

    Args:
        app: The FastAPI (or Starlette) application instance.
    """

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> Response:
        logger.info(
            "api_error",
            code=exc.code,
            status=exc.status,
            path=request.url.path,
            error_message=exc.message,
        )
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        response = error_response(http_exception_to_error(exc))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
        logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
        return error_response(ApiError(ErrorKind.VALIDATION, "Request validation failed", status=400))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> Response:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("unexpected_error", path=request.url.path, error_type=type(exc).__name__)
        return error_response(ApiError(ErrorKind.SERVER, INTERNAL_ERROR_MESSAGE))
