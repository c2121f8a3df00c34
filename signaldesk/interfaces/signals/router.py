"""
FastAPI routers for the signals bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas and the use cases.
Error mapping is handled by centralized error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status

from signaldesk.application.signals.clear_signals import ClearSignalsUseCase
from signaldesk.application.signals.dtos import GenerateSignalCommand, GetMarketDataQuery
from signaldesk.application.signals.generate_signal import GenerateSignalUseCase
from signaldesk.application.signals.get_latest_signal import GetLatestSignalUseCase
from signaldesk.application.signals.get_market_data import GetMarketDataUseCase
from signaldesk.application.signals.get_market_sessions import GetMarketSessionsUseCase
from signaldesk.application.signals.get_share_text import GetShareTextUseCase
from signaldesk.application.signals.list_signals import ListSignalsUseCase
from signaldesk.core.config import settings
from signaldesk.interfaces.signals.dependencies import (
    get_clear_signals_use_case,
    get_generate_signal_use_case,
    get_latest_signal_use_case,
    get_list_signals_use_case,
    get_market_data_use_case,
    get_market_sessions_use_case,
    get_share_text_use_case,
)
from signaldesk.interfaces.signals.schemas import (
    ErrorResponse,
    GenerateSignalRequest,
    MarketPointItem,
    MarketSessionItem,
    ShareTextResponse,
    SignalResponse,
)
from signaldesk.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/signals", tags=["signals"])
market_router = APIRouter(prefix="/market", tags=["market"])


@router.get(
    "",
    response_model=list[SignalResponse],
    responses={500: {"model": ErrorResponse}},
    summary="List signal history",
    description="All generated signals, newest first.",
)
def list_signals(
    use_case: ListSignalsUseCase = Depends(get_list_signals_use_case),
) -> list[SignalResponse]:
    """Return every stored signal, newest first."""
    return [SignalResponse.from_result(r) for r in use_case.execute()]


@router.get(
    "/latest",
    response_model=Optional[SignalResponse],
    responses={500: {"model": ErrorResponse}},
    summary="Get the latest signal",
    description="The most recent signal, or null when none exists.",
)
def get_latest_signal(
    use_case: GetLatestSignalUseCase = Depends(get_latest_signal_use_case),
) -> Optional[SignalResponse]:
    """Return the newest signal or null."""
    result = use_case.execute()
    return SignalResponse.from_result(result) if result is not None else None


@router.get(
    "/latest/share",
    response_model=ShareTextResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Share text for the latest signal",
)
def get_latest_share_text(
    use_case: GetShareTextUseCase = Depends(get_share_text_use_case),
) -> ShareTextResponse:
    """Return the social share text of the newest signal."""
    result = use_case.execute()
    return ShareTextResponse(signal_id=result.signal_id, text=result.text)


@router.post(
    "",
    response_model=SignalResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Generate a signal",
    description=(
        "Ask every AI provider for an opinion on the pair, fuse them by "
        "majority vote and store the resulting signal."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
async def generate_signal(
    request: Request,
    payload: GenerateSignalRequest,
    use_case: GenerateSignalUseCase = Depends(get_generate_signal_use_case),
) -> SignalResponse:
    """Generate and store a consensus signal for a pair."""
    result = await use_case.execute(GenerateSignalCommand(pair=payload.pair))
    return SignalResponse.from_result(result)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={500: {"model": ErrorResponse}},
    summary="Clear signal history",
)
def clear_signals(
    use_case: ClearSignalsUseCase = Depends(get_clear_signals_use_case),
) -> Response:
    """Delete every stored signal. Succeeds on an empty history."""
    use_case.execute()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@market_router.get(
    "/sessions",
    response_model=list[MarketSessionItem],
    summary="Forex session status",
    description="London, New York, Tokyo and Sydney sessions with their open flag.",
)
def get_market_sessions(
    use_case: GetMarketSessionsUseCase = Depends(get_market_sessions_use_case),
) -> list[MarketSessionItem]:
    """Return the forex sessions and which of them are open now."""
    return [
        MarketSessionItem(
            name=s.name, open_hour=s.open_hour, close_hour=s.close_hour, active=s.active
        )
        for s in use_case.execute()
    ]


@market_router.get(
    "/pairs",
    response_model=list[str],
    summary="Suggested pairs",
)
def get_supported_pairs() -> list[str]:
    """Return the pairs offered in the dashboard selector."""
    return list(settings.supported_pairs)


@market_router.get(
    "/{pair:path}",
    response_model=list[MarketPointItem],
    summary="Synthetic chart data",
    description="Twenty random-walk points around 100.0, oldest first.",
)
def get_market_data(
    pair: str,
    use_case: GetMarketDataUseCase = Depends(get_market_data_use_case),
) -> list[MarketPointItem]:
    """Return the synthetic price series for a pair."""
    results = use_case.execute(GetMarketDataQuery(pair=pair))
    return [MarketPointItem(time=r.time, value=r.value) for r in results]
