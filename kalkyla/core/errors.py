"""
Domain exceptions and their HTTP mapping.
Challenge: Services stay HTTP-agnostic while endpoints return consistent error bodies.
Design: Services raise KalkylaError subclasses; handlers registered on the app translate them.
"""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class KalkylaError(Exception):
    """Base for expected, user-facing failures. Message is safe to show."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


class AuthenticationError(KalkylaError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(KalkylaError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(KalkylaError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(KalkylaError):
    status_code = status.HTTP_409_CONFLICT


class DomainValidationError(KalkylaError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class RateLimitedError(KalkylaError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class UpstreamError(KalkylaError):
    """A third-party API (price feed) failed or answered garbage."""

    status_code = status.HTTP_502_BAD_GATEWAY


async def kalkyla_error_handler(request: Request, exc: KalkylaError) -> JSONResponse:
    content = {"detail": exc.message}
    content.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log with an error id the client can quote; never leak internals."""
    error_id = uuid.uuid4().hex[:12]
    logger.error(
        "Unhandled exception [%s] in %s %s: %s",
        error_id,
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error_id": error_id},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KalkylaError, kalkyla_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
