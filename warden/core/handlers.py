"""
Global exception handlers for the FastAPI application.

Domain errors are mapped to HTTP responses here and nowhere else. Every
error body has the shape ``{"detail": message, "code": code}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from warden.core.exceptions import (
    BadRequestError,
    EmailConflictError,
    FileUploadError,
    ForbiddenError,
    InternalError,
    MailerError,
    RateLimitExceededError,
    UnauthorizedError,
    UserNotFoundError,
    UsernameConflictError,
    WardenError,
)

__all__ = [
    "status_for",
    "unauthorized_error_handler",
    "rate_limit_exceeded_error_handler",
    "warden_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[WardenError], int], ...] = (
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND),
    (UsernameConflictError, status.HTTP_409_CONFLICT),
    (EmailConflictError, status.HTTP_409_CONFLICT),
    (BadRequestError, status.HTTP_400_BAD_REQUEST),
    (RateLimitExceededError, status.HTTP_429_TOO_MANY_REQUESTS),
    (MailerError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (FileUploadError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: WardenError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(exc: WardenError) -> dict:
    return {"detail": exc.message, "code": exc.code}


async def unauthorized_error_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    """Handles credential and token failures with a ``401`` and a bearer challenge."""
    logger.warning("Authentication failure", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=_error_body(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def rate_limit_exceeded_error_handler(
    request: Request, exc: RateLimitExceededError
) -> JSONResponse:
    content = _error_body(exc)
    content["retry_after"] = exc.retry_after
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=content,
        headers={
            "Retry-After": str(exc.retry_after),
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(exc.retry_after),
        },
    )


async def warden_error_handler(request: Request, exc: WardenError) -> JSONResponse:
    """Handles every other ``WardenError`` through the status table."""
    status_code = status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed", error=exc.code, path=request.url.path)
    else:
        logger.info("Request rejected", error=exc.code, path=request.url.path, status=status_code)
    return JSONResponse(status_code=status_code, content=_error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Registers the exception handlers with the application.

    Starlette dispatches on the exception's MRO, so the specific handlers
    take precedence over ``warden_error_handler``.
    """
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_error_handler)
    app.add_exception_handler(WardenError, warden_error_handler)
