"""Middleware configuration for the FastAPI application.

Registers CORS, the global per-client rate limit, security headers and
request logging. Later registrations wrap earlier ones, so the security
headers also land on rate-limited responses and the request log sees the
final status.
"""

import time

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette import status

from warden.core.config.settings import settings
from warden.core.rate_limiting.ratelimiter import client_identifier

logger = structlog.get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Embedder-Policy": "require-corp",
}


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(global_rate_limit_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_logging_middleware)


async def global_rate_limit_middleware(request: Request, call_next):
    """Applies the ``global`` limiter to every request and reports it in headers.

    Rejected requests get a ``429`` with ``Retry-After`` and never reach a route.
    """
    container = getattr(request.app.state, "container", None)
    if container is None or not container.settings.RATE_LIMIT_ENABLED:
        return await call_next(request)

    result = await container.global_limiter.check(client_identifier(request))
    if not result.allowed:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "detail": "rate limit exceeded",
                "code": "rate_limit_exceeded",
                "retry_after": result.reset_after,
            },
            headers=result.headers(),
        )

    response = await call_next(request)
    for name, value in result.headers().items():
        response.headers.setdefault(name, value)
    return response


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


async def request_logging_middleware(request: Request, call_next):
    """Logs method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "HTTP request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
        client_ip=client_identifier(request),
    )
    return response
