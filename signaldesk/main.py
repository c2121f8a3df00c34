"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (signals, market, health)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Signal store schema creation at startup

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from signaldesk.core.config import settings
from signaldesk.infrastructure.signals.signal_repository import create_schema
from signaldesk.interfaces.health import router as health_router
from signaldesk.interfaces.signals.dependencies import get_db_engine
from signaldesk.interfaces.signals.router import market_router
from signaldesk.interfaces.signals.router import router as signals_router
from signaldesk.shared.errors.handlers import register_error_handlers
from signaldesk.shared.logging import configure_logging
from signaldesk.shared.security.headers import SecurityHeadersMiddleware
from signaldesk.shared.security.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: create the signals table, dispose the engine."""
    engine = None
    try:
        engine = get_db_engine()
        create_schema(engine)
        logger.info("Signal store ready")
    except Exception:
        logger.warning(
            "Signal store could not be initialized. "
            "Signal endpoints will fail until the database is reachable.",
            exc_info=True,
        )

    yield

    if engine is not None:
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api")
    app.include_router(signals_router, prefix="/api")
    app.include_router(market_router, prefix="/api")

    return app


app = create_app()
