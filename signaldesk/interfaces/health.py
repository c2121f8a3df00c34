"""
Health check router.

Liveness probe for the dashboard backend. Reports the service name,
version and which AI providers have credentials; it never calls a
provider or the database.
"""

from fastapi import APIRouter

from signaldesk.core.config import settings
from signaldesk.domain.signals.entities import ProviderName
from signaldesk.interfaces.signals.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Service name, version and the AI providers with an API key.",
)
def health_check() -> HealthResponse:
    configured = [
        provider.value
        for provider, key in (
            (ProviderName.OPENAI, settings.openai_api_key),
            (ProviderName.ANTHROPIC, settings.anthropic_api_key),
            (ProviderName.GEMINI, settings.gemini_api_key),
        )
        if key
    ]
    return HealthResponse(
        status="ok",
        service=settings.project_name,
        version=settings.version,
        configured_providers=configured,
    )
