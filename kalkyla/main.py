"""
FastAPI application entry point.
Challenge: Mount routes, middleware (CORS, Prometheus), error handlers and rate limiting.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from kalkyla.api.v1.router import api_router
from kalkyla.cache.redis_client import close_redis
from kalkyla.config import get_settings
from kalkyla.core.audit import SecurityEventType, log_security_event
from kalkyla.core.errors import setup_exception_handlers
from kalkyla.core.rate_limit import limiter
from kalkyla.core.security import hash_ip

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Shutdown: close the shared Redis client."""
    logger.info("Kalkyla API starting")
    yield
    await close_redis()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """slowapi 429 response, plus an audit entry for the offending (hashed) IP."""
    ip = get_remote_address(request)
    log_security_event(
        SecurityEventType.API_RATE_LIMITED,
        ip_hash=hash_ip(ip) if ip else None,
        metadata={"path": request.url.path, "limit": str(exc.detail)},
    )
    return _rate_limit_exceeded_handler(request, exc)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        description="Battery and solar ROI calculations, share links and lead matching for Swedish installers.",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.app_url] if settings.environment == "production" else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
