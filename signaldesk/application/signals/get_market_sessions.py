"""
Use case: Report which forex sessions are open.

Input: None
Output: list[MarketSessionResult]
Side effects: None.
Failure cases: None.
"""

from signaldesk.application.signals.clock import Clock, utc_now
from signaldesk.application.signals.dtos import MarketSessionResult
from signaldesk.domain.signals.sessions import market_sessions


class GetMarketSessionsUseCase:
    """Evaluates session hours against the current UTC hour."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock

    def execute(self) -> list[MarketSessionResult]:
        return [
            MarketSessionResult(
                name=s.name,
                open_hour=s.open_hour,
                close_hour=s.close_hour,
                active=s.active,
            )
            for s in market_sessions(self._clock().hour)
        ]
