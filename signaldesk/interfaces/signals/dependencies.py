"""
Dependency injection for the signals bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the signals context.
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from signaldesk.application.signals.clear_signals import ClearSignalsUseCase
from signaldesk.application.signals.generate_signal import GenerateSignalUseCase
from signaldesk.application.signals.get_latest_signal import GetLatestSignalUseCase
from signaldesk.application.signals.get_market_data import GetMarketDataUseCase
from signaldesk.application.signals.get_market_sessions import GetMarketSessionsUseCase
from signaldesk.application.signals.get_share_text import GetShareTextUseCase
from signaldesk.application.signals.list_signals import ListSignalsUseCase
from signaldesk.core.config import settings
from signaldesk.infrastructure.signals.opinion_providers import (
    HttpOpinionProvider,
    build_opinion_providers,
)
from signaldesk.infrastructure.signals.prompt_loader import get_prompt_loader
from signaldesk.infrastructure.signals.signal_repository import SignalRepositoryAdapter


@lru_cache(maxsize=1)
def get_db_engine() -> Engine:
    """Build the SQLAlchemy engine once from application settings."""
    return create_engine(settings.get_database_dsn(), pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_opinion_providers() -> tuple[HttpOpinionProvider, ...]:
    """Build the three provider clients once, in fixed provider order."""
    return tuple(build_opinion_providers(settings, get_prompt_loader().system_prompt))


def _get_signal_repository() -> SignalRepositoryAdapter:
    return SignalRepositoryAdapter(engine=get_db_engine())


def get_generate_signal_use_case() -> GenerateSignalUseCase:
    """Build GenerateSignalUseCase with its infrastructure dependencies."""
    return GenerateSignalUseCase(
        providers=get_opinion_providers(),
        repository=_get_signal_repository(),
        render_prompt=get_prompt_loader().render_user_prompt,
        provider_timeout=settings.provider_timeout_seconds,
        window_label=settings.signal_timezone_label,
    )


def get_list_signals_use_case() -> ListSignalsUseCase:
    """Build ListSignalsUseCase with its infrastructure dependencies."""
    return ListSignalsUseCase(repository=_get_signal_repository())


def get_latest_signal_use_case() -> GetLatestSignalUseCase:
    """Build GetLatestSignalUseCase with its infrastructure dependencies."""
    return GetLatestSignalUseCase(repository=_get_signal_repository())


def get_clear_signals_use_case() -> ClearSignalsUseCase:
    """Build ClearSignalsUseCase with its infrastructure dependencies."""
    return ClearSignalsUseCase(repository=_get_signal_repository())


def get_share_text_use_case() -> GetShareTextUseCase:
    """Build GetShareTextUseCase with its infrastructure dependencies."""
    return GetShareTextUseCase(repository=_get_signal_repository())


def get_market_data_use_case() -> GetMarketDataUseCase:
    return GetMarketDataUseCase()


def get_market_sessions_use_case() -> GetMarketSessionsUseCase:
    return GetMarketSessionsUseCase()
