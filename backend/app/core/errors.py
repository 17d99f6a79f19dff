"""Application errors and their mapping to JSON error responses.

Every error rendered to a client has the shape::

    {"error": "<machine_code>", "detail": "<human readable message>"}

Client mistakes (4xx) are logged at WARNING, store and file failures (5xx)
at ERROR together with the underlying cause.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

LOGGER = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationFailed(AppError):
    code = "validation_error"


class ConflictError(AppError):
    code = "email_taken"


class InvalidCodeError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_code"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StorageError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "storage_error"


class FileStorageError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "io_error"


class DuplicateKeyError(Exception):
    """Raised by the store when an insert violates the email or code unique index."""


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": message})


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            LOGGER.error(
                "❌ %s %s failed: %s (code=%s, cause=%r)",
                request.method,
                request.url.path,
                exc.message,
                exc.code,
                exc.__cause__,
            )
        else:
            LOGGER.warning("⚠️ %s %s rejected: %s (code=%s)", request.method, request.url.path, exc.message, exc.code)
        return error_response(exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.warning("⚠️ %s %s invalid body: %s", request.method, request.url.path, exc.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, "validation_error", "Invalid request body")
