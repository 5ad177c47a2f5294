"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BadRequestException(AppException):
    """Raised when input or a booking rule is rejected."""

    status_code = 400
    code = "bad_request"


class UnauthorizedException(AppException):
    """Raised when the caller is not authenticated."""

    status_code = 401
    code = "unauthorized"


class ForbiddenException(AppException):
    """Raised when user has no rights for operation."""

    status_code = 403
    code = "forbidden"


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class ConflictException(AppException):
    """Raised when entity conflicts with current state."""

    status_code = 409
    code = "conflict"


class RateLimitException(AppException):
    """Raised when a caller exceeds the request budget."""

    status_code = 429
    code = "rate_limited"


def _error_body(message: str, code: str) -> dict[str, object]:
    return {"success": False, "error": message, "code": code}


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.code))


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first validation problem as a plain 400 message."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
        message = f"{location}: {detail}" if location else detail
    return JSONResponse(status_code=400, content=_error_body(message, "bad_request"))


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), "http_error"),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content=_error_body("Internal server error", "internal_error"))


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
