"""
Centralized error handlers for FastAPI.

Maps signals domain errors to HTTP responses, one stage at a time:
validation (400), lookup (404), providers (503), storage (500).
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from signaldesk.domain.signals.errors import (
    InvalidPairError,
    ProvidersUnavailableError,
    SignalDomainError,
    SignalNotFoundError,
    SignalPersistenceError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_500 = 500
HTTP_503 = 503


def _error_response(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str] = {"message": message}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(InvalidPairError)
    async def handle_invalid_pair(
        _request: Request, exc: InvalidPairError
    ) -> JSONResponse:
        """Handle blank or oversized pair identifiers."""
        logger.warning("Invalid pair: %r", exc.pair)
        return _error_response(HTTP_400, "Invalid pair", "pair must be a non-blank string")

    @app.exception_handler(SignalNotFoundError)
    async def handle_signal_not_found(
        _request: Request, exc: SignalNotFoundError
    ) -> JSONResponse:
        """Handle lookups on an empty signal history."""
        logger.info("Signal not found: %s", exc.message)
        return _error_response(HTTP_404, "No signal available")

    @app.exception_handler(ProvidersUnavailableError)
    async def handle_providers_unavailable(
        _request: Request, exc: ProvidersUnavailableError
    ) -> JSONResponse:
        """Handle a generation where no AI provider answered."""
        logger.error("All AI providers failed: %s", ", ".join(exc.providers))
        return _error_response(HTTP_503, "AI providers unavailable")

    @app.exception_handler(SignalPersistenceError)
    async def handle_persistence(
        _request: Request, exc: SignalPersistenceError
    ) -> JSONResponse:
        """Handle signal store failures."""
        logger.error("Signal store error during %s: %s", exc.operation, exc.reason)
        return _error_response(HTTP_500, "Signal storage failed")

    @app.exception_handler(SignalDomainError)
    async def handle_signal_domain(
        _request: Request, exc: SignalDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled signals domain errors."""
        logger.error("Unhandled signals domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
